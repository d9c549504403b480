"""Dashboard views: one configuration record per chart plus the render pipeline.

Every view is recomputed from the ``(dataset, selections)`` pair on each
call; nothing is cached between views, so a failure in one view is reported
on that view only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple, Union

from sales_core import charts
from sales_core.aggregate import Aggregate, ScatterSeries, SortPolicy, aggregate, label_key, month_key, scatter_series
from sales_core.coercion import parse_currency, parse_integer
from sales_core.config import CURRENCY_AXIS_TITLE, TOP_BRANDS_N, TOP_PRODUCTS_N, UNKNOWN_FEMININE, UNKNOWN_MASCULINE
from sales_core.data import SalesDataset
from sales_core.errors import EmptyAggregateError, EmptyFilterResultError, NoDatasetError, ViewError
from sales_core.filters import FilterSelections, apply_filters

logger = logging.getLogger(__name__)

ChartKind = Literal["bar", "hbar", "pie", "line", "scatter"]
Measure = Literal["currency", "integer"]
Grouping = Literal["label", "month"]

WIDE_MARGIN = {"t": 50, "b": 100, "l": 80, "r": 40}
LEFT_MARGIN = {"t": 50, "b": 50, "l": 200, "r": 40}
PIE_MARGIN = {"t": 80, "b": 80, "l": 40, "r": 40}


@dataclass(frozen=True)
class ViewConfig:
    name: str
    title: str
    subject: str
    kind: ChartKind
    group_field: str
    measure_field: str
    measure: Measure = "currency"
    grouping: Grouping = "label"
    default_label: str = UNKNOWN_MASCULINE
    policy: SortPolicy = SortPolicy()
    x_title: Optional[str] = None
    y_title: Optional[str] = None
    legend_title: Optional[str] = None
    color: Optional[str] = None
    margin: Dict[str, int] = field(default_factory=lambda: dict(WIDE_MARGIN))
    extra_fields: Tuple[str, ...] = ()
    empty_message: Optional[str] = None

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return (self.group_field, self.measure_field) + self.extra_fields

    def layout(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "margin": dict(self.margin)}
        if self.x_title is not None:
            out["x_title"] = self.x_title
        if self.y_title is not None:
            out["y_title"] = self.y_title
        if self.legend_title is not None:
            out["legend_title"] = self.legend_title
        return out


VIEWS: Dict[str, ViewConfig] = {
    v.name: v
    for v in [
        ViewConfig(
            name="revenue_by_state",
            title="Faturamento Total por Estado (UF)",
            subject="Faturamento por Estado",
            kind="bar",
            group_field="state",
            measure_field="revenue",
            default_label=UNKNOWN_MASCULINE,
            x_title="Estado (UF)",
            y_title=CURRENCY_AXIS_TITLE,
            color="#007bff",
        ),
        ViewConfig(
            name="revenue_by_store",
            title="Faturamento Total por Loja",
            subject="Faturamento por Loja",
            kind="bar",
            group_field="store",
            measure_field="revenue",
            default_label=UNKNOWN_FEMININE,
            x_title="Loja",
            y_title=CURRENCY_AXIS_TITLE,
            color="#28a745",
        ),
        ViewConfig(
            name="top_products_by_revenue",
            title=f"Top {TOP_PRODUCTS_N} Produtos por Faturamento",
            subject="Top Produtos por Faturamento",
            kind="hbar",
            group_field="product",
            measure_field="revenue",
            default_label=UNKNOWN_MASCULINE,
            policy=SortPolicy(top_n=TOP_PRODUCTS_N, reverse=True),
            x_title=CURRENCY_AXIS_TITLE,
            y_title="Produto",
            color="#ffc107",
            margin=dict(LEFT_MARGIN),
        ),
        ViewConfig(
            name="revenue_by_category",
            title="Faturamento por Categoria",
            subject="Faturamento por Categoria",
            kind="pie",
            group_field="category",
            measure_field="revenue",
            default_label=UNKNOWN_FEMININE,
            margin=dict(PIE_MARGIN),
        ),
        ViewConfig(
            name="top_brands_by_revenue",
            title=f"Top {TOP_BRANDS_N} Marcas por Faturamento",
            subject="Top Marcas por Faturamento",
            kind="hbar",
            group_field="brand",
            measure_field="revenue",
            default_label=UNKNOWN_FEMININE,
            policy=SortPolicy(top_n=TOP_BRANDS_N, reverse=True),
            x_title=CURRENCY_AXIS_TITLE,
            y_title="Marca",
            color="#6f42c1",
            margin=dict(LEFT_MARGIN),
        ),
        ViewConfig(
            name="monthly_revenue",
            title="Evolução Mensal do Faturamento",
            subject="Evolução Mensal do Faturamento",
            kind="line",
            group_field="date",
            measure_field="revenue",
            grouping="month",
            policy=SortPolicy(order="key_asc"),
            x_title="Mês (Ano-Mês)",
            y_title=CURRENCY_AXIS_TITLE,
            color="#dc3545",
            empty_message=(
                "Não foram encontrados dados de faturamento mensais válidos para exibir com os filtros atuais. "
                "Verifique a coluna de data."
            ),
        ),
        ViewConfig(
            name="top_products_by_quantity",
            title=f"Top {TOP_PRODUCTS_N} Produtos por Quantidade Vendida",
            subject="Top Produtos por Quantidade",
            kind="hbar",
            group_field="product",
            measure_field="quantity",
            measure="integer",
            default_label=UNKNOWN_MASCULINE,
            policy=SortPolicy(top_n=TOP_PRODUCTS_N, reverse=True),
            x_title="Quantidade Total Vendida",
            y_title="Produto",
            color="#20c997",
            margin=dict(LEFT_MARGIN),
        ),
        ViewConfig(
            name="quantity_vs_revenue",
            title="Dispersão: Quantidade Vendida vs. Valor da Venda",
            subject="o Gráfico de Dispersão",
            kind="scatter",
            group_field="quantity",
            measure_field="revenue",
            extra_fields=("product", "category"),
            x_title="Quantidade Vendida (Unidades)",
            y_title="Valor da Venda (R$)",
            legend_title="Categorias",
            empty_message=(
                "Não foram encontrados dados válidos (quantidade e valor > 0) para o gráfico de dispersão "
                "com os filtros atuais."
            ),
        ),
        ViewConfig(
            name="quantity_by_category",
            title="Distribuição de Quantidade Vendida por Categoria",
            subject="Distribuição de Quantidade por Categoria",
            kind="pie",
            group_field="category",
            measure_field="quantity",
            measure="integer",
            default_label=UNKNOWN_FEMININE,
            margin=dict(PIE_MARGIN),
        ),
    ]
}


def get_view(view: Union[str, ViewConfig]) -> ViewConfig:
    if isinstance(view, ViewConfig):
        return view
    try:
        return VIEWS[view]
    except KeyError:
        raise KeyError(f"Unknown view: {view}") from None


@dataclass(frozen=True)
class ViewResult:
    view: str
    kind: ChartKind
    layout: Dict[str, Any]
    status: str = "ok"
    message: Optional[str] = None
    missing_field: Optional[str] = None
    aggregate: Optional[Aggregate] = None
    series: List[ScatterSeries] = field(default_factory=list)
    color: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def chart(self):
        if not self.ok:
            return None
        if self.kind == "scatter":
            return charts.scatter_chart(self.series, self.layout)
        agg = self.aggregate or Aggregate()
        if self.kind == "hbar":
            return charts.horizontal_bar_chart(agg, self.layout, color=self.color)
        if self.kind == "pie":
            return charts.donut_chart(agg, self.layout)
        if self.kind == "line":
            return charts.line_chart(agg, self.layout, color=self.color)
        return charts.bar_chart(agg, self.layout, color=self.color)

    def series_data(self) -> Dict[str, Any]:
        if self.kind == "scatter":
            return {"series": [{"name": s.name, "x": s.x, "y": s.y, "text": s.text} for s in self.series]}
        agg = self.aggregate or Aggregate()
        return {"labels": list(agg.labels), "values": list(agg.values)}

    def to_payload(self, *, include_chart: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "view": self.view,
            "kind": self.kind,
            "status": self.status,
            "message": self.message,
            "missing_field": self.missing_field,
            "layout": self.layout,
            "data": self.series_data() if self.ok else None,
        }
        if include_chart:
            chart = self.chart()
            payload["chart"] = charts.to_vega_spec(chart) if chart is not None else None
        return payload


def _compute(config: ViewConfig, dataset: Optional[SalesDataset], selections: Optional[FilterSelections]) -> ViewResult:
    if dataset is None:
        raise NoDatasetError("Nenhum arquivo carregado. Selecione um arquivo Excel para começar a análise.", view=config.name)

    df = apply_filters(dataset.frame, dataset.schema, selections)
    if df.empty:
        raise EmptyFilterResultError(
            f"Nenhum dado corresponde aos filtros selecionados para {config.subject}.", view=config.name
        )

    columns = {name: dataset.schema.require(name, view=config.name) for name in config.required_fields}
    empty_message = config.empty_message or (
        f"Não foram encontrados dados para {config.subject} com os filtros atuais."
    )
    result = dict(view=config.name, kind=config.kind, layout=config.layout(), color=config.color)

    if config.kind == "scatter":
        series = scatter_series(
            df,
            quantity_col=columns["quantity"],
            revenue_col=columns["revenue"],
            label_col=columns["product"],
            group_col=columns["category"],
        )
        if not series:
            raise EmptyAggregateError(empty_message, view=config.name)
        return ViewResult(series=series, **result)

    agg = aggregate(
        df,
        columns[config.group_field],
        columns[config.measure_field],
        coerce=parse_integer if config.measure == "integer" else parse_currency,
        key=month_key if config.grouping == "month" else label_key(config.default_label),
        policy=config.policy,
    )
    if not len(agg):
        raise EmptyAggregateError(empty_message, view=config.name)
    return ViewResult(aggregate=agg, **result)


def compute_view(
    view: Union[str, ViewConfig],
    dataset: Optional[SalesDataset],
    selections: Optional[FilterSelections] = None,
) -> ViewResult:
    config = get_view(view)
    try:
        return _compute(config, dataset, selections)
    except ViewError as exc:
        return ViewResult(
            view=config.name,
            kind=config.kind,
            layout=config.layout(),
            status=exc.status,
            message=str(exc),
            missing_field=getattr(exc, "field", None),
            color=config.color,
        )
    except Exception:
        logger.exception("%s failed", config.name)
        return ViewResult(
            view=config.name,
            kind=config.kind,
            layout=config.layout(),
            status="error",
            message="Ocorreu um erro ao processar os dados para o gráfico.",
            color=config.color,
        )


def render_dashboard(
    dataset: Optional[SalesDataset],
    selections: Optional[FilterSelections] = None,
    views: Optional[Iterable[str]] = None,
) -> Dict[str, ViewResult]:
    names = list(views) if views is not None else list(VIEWS)
    return {name: compute_view(name, dataset, selections) for name in names}
