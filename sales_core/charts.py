from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from sales_core.aggregate import Aggregate, ScatterSeries

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _mark_style(color: Optional[str]) -> Dict[str, Any]:
    return {"color": color} if color else {}


def _title(layout: Dict[str, Any]) -> str:
    return layout.get("title", "")


def bar_chart(agg: Aggregate, layout: Dict[str, Any], *, color: Optional[str] = None, label_angle: int = 0) -> alt.Chart:
    hover = alt.selection_point(fields=["label"], on="mouseover", empty="all")
    return (
        alt.Chart(agg.to_frame(), title=_title(layout))
        .mark_bar(**_mark_style(color))
        .encode(
            x=alt.X("label:N", sort=None, title=layout.get("x_title"), axis=alt.Axis(labelAngle=label_angle, grid=False)),
            y=alt.Y("value:Q", title=layout.get("y_title"), axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip("label:N", title=layout.get("x_title")), alt.Tooltip("value:Q", title=layout.get("y_title"), format=",.2f")],
        )
        .add_params(hover)
    )


def horizontal_bar_chart(agg: Aggregate, layout: Dict[str, Any], *, color: Optional[str] = None) -> alt.Chart:
    # series arrive smallest-first; draw the last entry at the top
    order: List[str] = list(reversed(agg.labels))
    return (
        alt.Chart(agg.to_frame(), title=_title(layout))
        .mark_bar(**_mark_style(color))
        .encode(
            y=alt.Y("label:N", sort=order, title=layout.get("y_title"), axis=alt.Axis(grid=False)),
            x=alt.X("value:Q", title=layout.get("x_title"), axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("label:N", title=layout.get("y_title")), alt.Tooltip("value:Q", title=layout.get("x_title"), format=",.2f")],
        )
    )


def donut_chart(agg: Aggregate, layout: Dict[str, Any]) -> alt.Chart:
    frame = agg.to_frame()
    frame["order"] = range(len(frame))
    return (
        alt.Chart(frame, title=_title(layout))
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q", stack=True),
            color=alt.Color("label:N", sort=agg.labels, legend=alt.Legend(orient="bottom", title=None)),
            order=alt.Order("order:Q"),
            tooltip=[alt.Tooltip("label:N"), alt.Tooltip("value:Q", format=",.2f")],
        )
    )


def line_chart(agg: Aggregate, layout: Dict[str, Any], *, color: Optional[str] = None) -> alt.Chart:
    return (
        alt.Chart(agg.to_frame(), title=_title(layout))
        .mark_line(point={"filled": True, "size": 60}, interpolate="monotone", **_mark_style(color))
        .encode(
            x=alt.X("label:O", sort=None, title=layout.get("x_title"), axis=alt.Axis(grid=False)),
            y=alt.Y("value:Q", title=layout.get("y_title"), axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("label:O", title=layout.get("x_title")), alt.Tooltip("value:Q", format=",.2f")],
        )
    )


def scatter_chart(series: List[ScatterSeries], layout: Dict[str, Any]) -> alt.Chart:
    rows = [
        {"series": s.name, "x": x, "y": y, "text": text}
        for s in series
        for x, y, text in zip(s.x, s.y, s.text)
    ]
    frame = pd.DataFrame(rows, columns=["series", "x", "y", "text"])
    hover = alt.selection_point(fields=["series"], on="mouseover", empty="all")
    return (
        alt.Chart(frame, title=_title(layout))
        .mark_circle(size=64)
        .encode(
            x=alt.X("x:Q", title=layout.get("x_title")),
            y=alt.Y("y:Q", title=layout.get("y_title")),
            color=alt.Color("series:N", sort=[s.name for s in series], title=layout.get("legend_title")),
            opacity=alt.condition(hover, alt.value(0.7), alt.value(0.15)),
            tooltip=[
                alt.Tooltip("text:N", title="Produto"),
                alt.Tooltip("x:Q", title=layout.get("x_title")),
                alt.Tooltip("y:Q", title=layout.get("y_title"), format=",.2f"),
            ],
        )
        .add_params(hover)
    )
