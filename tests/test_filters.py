import pandas as pd

from sales_core.data import dataset_from_records
from sales_core.filters import FilterSelections, apply_filters, filter_options, normalize_filters


def test_empty_selection_is_noop(sales_dataset):
    out = apply_filters(sales_dataset.frame, sales_dataset.schema, FilterSelections())
    pd.testing.assert_frame_equal(out, sales_dataset.frame)
    assert apply_filters(sales_dataset.frame, sales_dataset.schema, None) is sales_dataset.frame


def test_single_dimension(sales_dataset):
    out = apply_filters(sales_dataset.frame, sales_dataset.schema, FilterSelections(states=["SP"]))
    assert out["UF"].tolist() == ["SP", "SP"]


def test_dimensions_combine_with_and(sales_dataset):
    sel = FilterSelections(states=["SP", "RJ"], brands=["Omo"])
    out = apply_filters(sales_dataset.frame, sales_dataset.schema, sel)
    assert out["Nome do Produto"].tolist() == ["Sabão em pó"]


def test_result_is_subset_and_idempotent(sales_dataset):
    sel = FilterSelections(categories=["Mercearia"], stores=["Centro", "Savassi"])
    once = apply_filters(sales_dataset.frame, sales_dataset.schema, sel)
    twice = apply_filters(once, sales_dataset.schema, sel)
    assert set(once.index) <= set(sales_dataset.frame.index)
    pd.testing.assert_frame_equal(once, twice)


def test_missing_cells_match_sentinel(sales_dataset):
    out = apply_filters(sales_dataset.frame, sales_dataset.schema, FilterSelections(categories=["N/A"]))
    assert out["UF"].tolist() == ["MG"]


def test_values_are_trimmed_before_matching():
    ds = dataset_from_records([{"UF": " SP "}, {"UF": "RJ"}])
    out = apply_filters(ds.frame, ds.schema, FilterSelections(states=["SP"]))
    assert len(out) == 1


def test_unresolved_dimension_is_ignored():
    ds = dataset_from_records([{"UF": "SP", "Valor Venda": 1}])
    out = apply_filters(ds.frame, ds.schema, FilterSelections(brands=["Omo"]))
    assert len(out) == 1


def test_no_match_gives_empty_frame(sales_dataset):
    out = apply_filters(sales_dataset.frame, sales_dataset.schema, FilterSelections(states=["BA"]))
    assert out.empty
    assert list(out.columns) == list(sales_dataset.frame.columns)


def test_filter_options_sorted_with_sentinel(sales_dataset):
    options = filter_options(sales_dataset.frame, sales_dataset.schema)
    assert options["state"] == ["MG", "RJ", "SP"]
    assert options["category"] == ["Limpeza", "Mercearia", "N/A"]
    assert options["store"] == ["Centro", "Copacabana", "Savassi"]
    assert options["brand"] == ["Camil", "Omo", "Tio João"]


def test_filter_options_for_unresolved_dimension():
    ds = dataset_from_records([{"UF": "SP"}])
    assert filter_options(ds.frame, ds.schema)["brand"] == []


def test_normalize_filters_accepts_both_key_styles():
    sel = normalize_filters({"states": ["SP", "SP", None], "selected_brands": ["Omo"], "stores": "Centro"})
    assert sel == FilterSelections(states=["SP"], brands=["Omo"], stores=["Centro"])
    assert normalize_filters(None).is_empty()
