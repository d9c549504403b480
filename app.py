import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from sales_core.config import ACCEPTED_EXTENSIONS, FILTER_LABELS
from sales_core.data import SalesDataset, load_dataset
from sales_core.errors import LoadError
from sales_core.filters import FilterSelections, apply_filters, filter_options
from sales_core.session import filter_widget_key, reset_for_upload, upload_identity
from sales_core.views import ViewResult, render_dashboard

alt.data_transformers.disable_max_rows()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("sales_dashboard")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(selections: FilterSelections) -> str:
    chips = []
    for (label, _), values in zip(FILTER_LABELS, [selections.states, selections.categories, selections.stores, selections.brands]):
        chips.append(f"{label}: {', '.join(values)}" if values else f"{label}: Todos")
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_view(result: ViewResult):
    if result.ok:
        chart = result.chart()
        st.altair_chart(chart, use_container_width=True)
        return
    if result.status in ("no_data", "empty_after_filter", "empty_aggregate"):
        st.info(result.message)
    else:
        st.warning(result.message)


# ---------- UI setup ----------
st.set_page_config(page_title="Análise de Vendas - Supermercado", layout="wide")
inject_base_styles()
st.title("Análise de Vendas - Supermercado")
st.caption("Envie a planilha de vendas (.xlsx / .xls) para gerar os gráficos de faturamento e quantidade.")

uploaded = st.file_uploader(
    "Selecione o arquivo Excel de vendas",
    type=[ext.lstrip(".") for ext in ACCEPTED_EXTENSIONS],
)
if uploaded is not None:
    reset_for_upload(
        st.session_state,
        upload_identity(uploaded.name, uploaded.size, getattr(uploaded, "file_id", None)),
    )

if uploaded is not None and st.session_state.get("dataset") is None:
    if st.button("Analisar Arquivo"):
        with st.spinner("Carregando e processando o arquivo..."):
            try:
                st.session_state["dataset"] = load_dataset(uploaded.getvalue(), uploaded.name)
                st.session_state.pop("load_error", None)
            except LoadError as exc:
                logger.warning("load failed: %s", exc)
                st.session_state["load_error"] = f"Erro ao processar o arquivo {uploaded.name}: {exc}"

if st.session_state.get("load_error"):
    st.error(st.session_state["load_error"])

dataset: Optional[SalesDataset] = st.session_state.get("dataset")
if dataset is None:
    if uploaded is None:
        st.info("Nenhum arquivo selecionado. Por favor, escolha um arquivo Excel para começar a análise.")
    elif not st.session_state.get("load_error"):
        st.info(f'Arquivo "{uploaded.name}" selecionado. Clique em "Analisar Arquivo" para carregar os dados.')
    st.stop()

st.success(f'Arquivo "{dataset.file_name}" carregado com sucesso! {dataset.row_count} linhas de dados originais encontradas.')

# ----- Sidebar: filters -----
options = filter_options(dataset.frame, dataset.schema)
selected: Dict[str, List[str]] = {}
with st.sidebar:
    st.markdown("### Filtros Interativos")
    for label, dimension in FILTER_LABELS:
        selected[dimension] = st.multiselect(
            label,
            options=options.get(dimension, []),
            default=[],
            key=filter_widget_key(dimension),
            help="Deixe vazio para mostrar todos.",
        )

selections = FilterSelections(
    states=selected["state"],
    categories=selected["category"],
    stores=selected["store"],
    brands=selected["brand"],
)

filtered = apply_filters(dataset.frame, dataset.schema, selections)
st.markdown(f"<div class='chip-row'>{format_filter_summary(selections)}</div>", unsafe_allow_html=True)
if filtered.empty:
    st.info("Nenhum dado corresponde aos filtros selecionados.")
else:
    st.download_button(
        "Exportar CSV",
        data=filtered.to_csv(index=False).encode("utf-8"),
        file_name="vendas_filtradas.csv",
        mime="text/csv",
    )

results = render_dashboard(dataset, selections)
result_list = list(results.values())
for idx in range(0, len(result_list), 2):
    cols = st.columns(2)
    for col, result in zip(cols, result_list[idx : idx + 2]):
        with col:
            with card(result.layout.get("title", result.view)):
                render_view(result)

with st.expander("Colunas identificadas", expanded=False):
    st.dataframe(
        pd.DataFrame([{"campo": k, "coluna": v or "-"} for k, v in dataset.schema.as_dict().items()]),
        hide_index=True,
        use_container_width=True,
    )
