"""
Configuration constants for the sales dashboard.
"""

from typing import Dict, List, Tuple

# ======================================================
#  SOURCE WORKBOOK
# ======================================================
PREFERRED_SHEET_NAME: str = "Sheet1"
ACCEPTED_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xls")

# ======================================================
#  HEADER ALIASES
# ======================================================
# Matched case/whitespace-insensitively; alias order is not significant.
# The spaced forms ("nome da loja", "nome do produto", "categoria do produto",
# "marca do produto", "valor da venda") are deliberate additions so that
# headers written with spaces resolve like their underscore forms.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "state": ("uf", "estado", "uf_da_compra"),
    "store": ("nome_da_loja", "nome_da_loj", "loja", "nome loja", "nome da loja", "store name", "store"),
    "product": ("nome_do_produto", "nome_do_produt", "produto", "nome produto", "nome do produto", "product name", "product"),
    "category": ("categoria_do_produto", "categoria_do_produt", "categoria do produto", "categoria", "category"),
    "brand": ("marca_do_produto", "marca_do_produt", "marca do produto", "marca", "brand"),
    "revenue": ("valor venda", "valorvendabruto", "receita", "faturamento", "valor_da_venda", "valor da venda"),
    "quantity": ("quantidad", "quantidade", "quantidade vendida", "qntd", "volume", "units sold"),
    "date": ("data_da_venda", "data da venda", "data", "date"),
}

# Human-readable header hints used in schema error messages.
FIELD_LABELS: Dict[str, str] = {
    "state": "UF (ou 'Estado', 'uf_da_compra')",
    "store": "Nome da Loja (ou 'nome_da_loj', 'loja')",
    "product": "Nome do Produto (ou 'nome_do_produt', 'produto')",
    "category": "Categoria do Produto (ou 'categoria_do_produt', 'categoria')",
    "brand": "Marca do Produto (ou 'marca_do_produt', 'marca')",
    "revenue": "Valor Venda (ou 'valor_da_venda', 'receita')",
    "quantity": "Quantidade (ou 'quantidad', 'qntd')",
    "date": "Data da Venda (ou 'data_da_venda', 'data')",
}

# ======================================================
#  FILTERS
# ======================================================
FILTER_DIMENSIONS: List[str] = ["state", "category", "store", "brand"]
FILTER_SENTINEL: str = "N/A"

FILTER_LABELS: List[Tuple[str, str]] = [
    ("Estado (UF)", "state"),
    ("Categoria do Produto", "category"),
    ("Loja", "store"),
    ("Marca do Produto", "brand"),
]

# ======================================================
#  VIEW DEFAULTS
# ======================================================
UNKNOWN_MASCULINE: str = "Desconhecido"
UNKNOWN_FEMININE: str = "Desconhecida"
SCATTER_LABEL_DEFAULT: str = "N/A"

TOP_PRODUCTS_N: int = 20
TOP_BRANDS_N: int = 15

CURRENCY_AXIS_TITLE: str = "Faturamento Total (R$)"
