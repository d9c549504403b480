from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from sales_core.coercion import is_blank, is_missing, to_text
from sales_core.config import ACCEPTED_EXTENSIONS, PREFERRED_SHEET_NAME
from sales_core.errors import EmptyDataError, FileReadError, SheetNotFoundError
from sales_core.schema import ResolvedSchema, resolve_schema

logger = logging.getLogger(__name__)

Grid = List[List[Any]]


@dataclass(frozen=True, eq=False)
class SalesDataset:
    frame: pd.DataFrame
    schema: ResolvedSchema
    sheet_name: str = ""
    file_name: Optional[str] = None

    @property
    def headers(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    @property
    def row_count(self) -> int:
        return int(len(self.frame))

    def summary(self) -> Dict[str, Any]:
        return {
            "file_name": self.file_name,
            "sheet_name": self.sheet_name,
            "rows": self.row_count,
            "headers": self.headers,
            "schema": self.schema.as_dict(),
        }


def records_frame(records: Sequence[Mapping[str, Any]], columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Build the object-dtype frame that holds a dataset's records."""
    records = [dict(r) for r in records]
    if columns is None:
        columns = list(dict.fromkeys(k for r in records for k in r))
    return pd.DataFrame(records, columns=list(columns), dtype=object)


def _header_text(value: object) -> str:
    if is_missing(value):
        return ""
    return to_text(value).strip()


def grid_to_records(grid: Grid, *, sheet_name: str = "") -> Tuple[List[str], List[Dict[str, Any]]]:
    """Turn a header-first cell grid into header-keyed records.

    Later columns sharing a header overwrite earlier ones; rows with no
    non-blank cell are dropped.
    """
    if len(grid) < 2:
        raise EmptyDataError(f"A planilha '{sheet_name}' está vazia ou contém apenas cabeçalhos.")

    headers = [_header_text(h) for h in grid[0]]
    records: List[Dict[str, Any]] = []
    for row in grid[1:]:
        row = list(row) if row is not None else []
        if all(is_blank(cell) for cell in row):
            continue
        record: Dict[str, Any] = {}
        for idx, header in enumerate(headers):
            cell = row[idx] if idx < len(row) else None
            record[header] = None if is_missing(cell) else cell
        records.append(record)

    if not records:
        raise EmptyDataError(f"Não foram encontrados dados válidos na planilha '{sheet_name}' após os cabeçalhos.")
    return list(dict.fromkeys(headers)), records


def read_workbook(content: bytes, filename: Optional[str] = None) -> Dict[str, Grid]:
    """Decode workbook bytes into ``{sheet name: cell grid}`` in declared sheet order."""
    suffix = Path(filename).suffix.lower() if filename else ""
    if suffix and suffix not in ACCEPTED_EXTENSIONS:
        raise FileReadError(f"Formato de arquivo não suportado: '{suffix}'. Use {', '.join(ACCEPTED_EXTENSIONS)}.")
    if not content:
        raise FileReadError("Falha ao ler o arquivo.")

    engine = "xlrd" if suffix == ".xls" else None
    try:
        # only truly empty cells are missing; "NA", "None", "N/A" stay text
        sheets = pd.read_excel(
            io.BytesIO(content),
            sheet_name=None,
            header=None,
            dtype=object,
            engine=engine,
            keep_default_na=False,
            na_values=[""],
        )
    except Exception as exc:
        # the readers raise zipfile/xlrd/openpyxl/ValueError types for corrupt input
        raise FileReadError(f"Falha ao ler o arquivo: {exc}") from exc

    workbook: Dict[str, Grid] = {}
    for name, df in sheets.items():
        df = df.astype(object)
        workbook[str(name)] = df.where(df.notna(), None).values.tolist()
    return workbook


def select_sheet(workbook: Mapping[str, Grid]) -> Tuple[str, Grid]:
    if PREFERRED_SHEET_NAME in workbook:
        return PREFERRED_SHEET_NAME, workbook[PREFERRED_SHEET_NAME]
    for name, grid in workbook.items():
        logger.warning("Sheet %r not found, falling back to %r", PREFERRED_SHEET_NAME, name)
        return name, grid
    raise SheetNotFoundError(f"A planilha '{PREFERRED_SHEET_NAME}' não foi encontrada no arquivo. Verifique o nome da planilha.")


def dataset_from_records(
    records: Sequence[Mapping[str, Any]],
    *,
    columns: Optional[Sequence[str]] = None,
    sheet_name: str = "",
    file_name: Optional[str] = None,
) -> SalesDataset:
    frame = records_frame(records, columns)
    schema = resolve_schema(list(frame.columns))
    return SalesDataset(frame=frame, schema=schema, sheet_name=sheet_name, file_name=file_name)


def load_dataset(content: bytes, filename: Optional[str] = None) -> SalesDataset:
    workbook = read_workbook(content, filename)
    sheet_name, grid = select_sheet(workbook)
    headers, records = grid_to_records(grid, sheet_name=sheet_name)
    dataset = dataset_from_records(records, columns=headers, sheet_name=sheet_name, file_name=filename)
    logger.info(
        "Loaded %s rows from %s[%s]; unresolved fields: %s",
        dataset.row_count,
        filename or "<bytes>",
        sheet_name,
        ", ".join(dataset.schema.missing()) or "none",
    )
    return dataset


def load_dataset_from_path(path: Path | str) -> SalesDataset:
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise FileReadError(f"Falha ao ler o arquivo {path.name}.") from exc
    return load_dataset(content, path.name)
