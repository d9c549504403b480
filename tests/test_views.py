import pytest

from sales_core.data import dataset_from_records
from sales_core.filters import FilterSelections
from sales_core.views import VIEWS, compute_view, get_view, render_dashboard

REVENUE_VIEWS = [
    "revenue_by_state",
    "revenue_by_store",
    "top_products_by_revenue",
    "revenue_by_category",
    "top_brands_by_revenue",
    "monthly_revenue",
    "quantity_vs_revenue",
]


def test_all_nine_views_configured():
    assert list(VIEWS) == [
        "revenue_by_state",
        "revenue_by_store",
        "top_products_by_revenue",
        "revenue_by_category",
        "top_brands_by_revenue",
        "monthly_revenue",
        "top_products_by_quantity",
        "quantity_vs_revenue",
        "quantity_by_category",
    ]


def test_unknown_view():
    with pytest.raises(KeyError):
        get_view("revenue_by_planet")


def test_state_scenario():
    ds = dataset_from_records(
        [
            {"UF": "SP", "Valor Venda": "R$ 100,00"},
            {"UF": "SP", "Valor Venda": "R$ 50,00"},
            {"UF": "RJ", "Valor Venda": "200"},
        ]
    )
    result = compute_view("revenue_by_state", ds)
    assert result.ok
    assert result.aggregate.pairs() == [("RJ", 200.0), ("SP", 150.0)]
    assert result.layout["title"] == "Faturamento Total por Estado (UF)"
    assert result.layout["margin"] == {"t": 50, "b": 100, "l": 80, "r": 40}


def test_top_products_by_revenue_truncates_and_reverses():
    rows = [{"Produto": f"P{i:02d}", "Receita": 2500 - 100 * i} for i in range(25)]
    result = compute_view("top_products_by_revenue", dataset_from_records(rows))
    values = result.aggregate.values
    assert len(values) == 20
    assert values[0] == 600
    assert values[-1] == 2500
    assert values == sorted(values)
    assert result.aggregate.labels[-1] == "P00"


def test_brands_top_15():
    rows = [{"Marca": f"M{i}", "Faturamento": 100 + i} for i in range(20)]
    result = compute_view("top_brands_by_revenue", dataset_from_records(rows))
    assert len(result.aggregate) == 15
    assert result.aggregate.labels[-1] == "M19"


def test_pie_views_keep_every_group(sales_dataset):
    result = compute_view("revenue_by_category", sales_dataset)
    assert result.aggregate.labels == ["Desconhecida", "Limpeza", "Mercearia"]
    assert result.aggregate.values == pytest.approx([1234.56, 200.0, 150.0])


def test_quantity_by_category(sales_dataset):
    result = compute_view("quantity_by_category", sales_dataset)
    assert result.aggregate.pairs() == [("Mercearia", 14), ("Limpeza", 3), ("Desconhecida", 0)]


def test_monthly_revenue_drops_bad_dates(sales_dataset):
    result = compute_view("monthly_revenue", sales_dataset)
    assert result.aggregate.labels == ["2024-01", "2024-02"]
    assert result.aggregate.values == pytest.approx([1334.56, 50.0])


def test_scatter_excludes_zero_quantity(sales_dataset):
    result = compute_view("quantity_vs_revenue", sales_dataset)
    assert result.ok
    names = [s.name for s in result.series]
    assert names == ["Mercearia", "Limpeza"]
    assert "Arroz 5kg" in result.series[0].text
    assert sum(len(s.x) for s in result.series) == 3


def test_missing_revenue_header_only_breaks_revenue_views():
    ds = dataset_from_records(
        [
            {
                "UF": "SP",
                "Loja": "Centro",
                "Produto": "Arroz",
                "Categoria": "Mercearia",
                "Marca": "Tio João",
                "Data": "2024-01-01",
                "Quantidade": 3,
            }
        ]
    )
    results = render_dashboard(ds)
    for name in REVENUE_VIEWS:
        assert results[name].status == "schema_error", name
        assert results[name].missing_field == "revenue"
    assert results["top_products_by_quantity"].ok
    assert results["quantity_by_category"].ok


def test_no_dataset_state():
    result = compute_view("revenue_by_state", None)
    assert result.status == "no_data"
    assert result.to_payload()["chart"] is None


def test_empty_after_filter_state(sales_dataset):
    result = compute_view("revenue_by_state", sales_dataset, FilterSelections(states=["BA"]))
    assert result.status == "empty_after_filter"
    assert "filtros" in result.message


def test_empty_after_processing_state():
    ds = dataset_from_records([{"Data": "sem data", "Valor Venda": 10}])
    result = compute_view("monthly_revenue", ds)
    assert result.status == "empty_aggregate"
    assert "data" in result.message


def test_scatter_empty_state():
    ds = dataset_from_records([{"Quantidade": 0, "Valor Venda": 10, "Produto": "A", "Categoria": "X"}])
    assert compute_view("quantity_vs_revenue", ds).status == "empty_aggregate"


def test_filters_flow_into_views(sales_dataset):
    result = compute_view("revenue_by_store", sales_dataset, FilterSelections(states=["SP"]))
    assert result.aggregate.pairs() == [("Centro", 150.0)]


def test_one_failing_view_does_not_block_others(sales_dataset, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("sales_core.views.scatter_series", boom)
    results = render_dashboard(sales_dataset)
    assert results["quantity_vs_revenue"].status == "error"
    assert all(r.ok for name, r in results.items() if name != "quantity_vs_revenue")


def test_payload_contains_series_layout_and_chart(sales_dataset):
    for name in VIEWS:
        payload = compute_view(name, sales_dataset).to_payload()
        assert payload["status"] == "ok", name
        assert payload["layout"]["title"]
        assert payload["chart"]["$schema"].startswith("https://vega.github.io/schema/vega-lite/")
    bar = compute_view("revenue_by_state", sales_dataset).to_payload()
    assert bar["data"] == {"labels": ["MG", "RJ", "SP"], "values": pytest.approx([1234.56, 200.0, 150.0])}
    scatter = compute_view("quantity_vs_revenue", sales_dataset).to_payload()
    assert scatter["data"]["series"][0]["name"] == "Mercearia"


def test_render_is_repeatable(sales_dataset):
    sel = FilterSelections(categories=["Mercearia"])
    first = {k: v.to_payload(include_chart=False) for k, v in render_dashboard(sales_dataset, sel).items()}
    second = {k: v.to_payload(include_chart=False) for k, v in render_dashboard(sales_dataset, sel).items()}
    assert first == second
