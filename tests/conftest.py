from __future__ import annotations

import io
from typing import Dict, List, Optional

import pandas as pd
import pytest

from sales_core.data import SalesDataset, dataset_from_records


def workbook_bytes(sheets: Dict[str, Optional[pd.DataFrame]]) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            (df if df is not None else pd.DataFrame()).to_excel(writer, sheet_name=name, index=False)
    return buf.getvalue()


SALES_ROWS: List[dict] = [
    {
        "UF": "SP",
        "Nome da Loja": "Centro",
        "Nome do Produto": "Arroz 5kg",
        "Categoria": "Mercearia",
        "Marca": "Tio João",
        "Valor Venda": "R$ 100,00",
        "Quantidade": 4,
        "Data da Venda": "2024-01-15",
    },
    {
        "UF": "SP",
        "Nome da Loja": "Centro",
        "Nome do Produto": "Feijão 1kg",
        "Categoria": "Mercearia",
        "Marca": "Camil",
        "Valor Venda": "R$ 50,00",
        "Quantidade": 10,
        "Data da Venda": "2024-02-03",
    },
    {
        "UF": "RJ",
        "Nome da Loja": "Copacabana",
        "Nome do Produto": "Sabão em pó",
        "Categoria": "Limpeza",
        "Marca": "Omo",
        "Valor Venda": "200",
        "Quantidade": "3 un",
        "Data da Venda": "N/A",
    },
    {
        "UF": "MG",
        "Nome da Loja": "Savassi",
        "Nome do Produto": "Arroz 5kg",
        "Categoria": None,
        "Marca": "Tio João",
        "Valor Venda": "R$ 1.234,56",
        "Quantidade": 0,
        "Data da Venda": "2024-01-20",
    },
]


@pytest.fixture
def sales_rows() -> List[dict]:
    return [dict(r) for r in SALES_ROWS]


@pytest.fixture
def sales_dataset(sales_rows) -> SalesDataset:
    return dataset_from_records(sales_rows, sheet_name="Sheet1", file_name="vendas.xlsx")
