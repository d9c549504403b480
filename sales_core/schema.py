from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sales_core.config import FIELD_ALIASES, FIELD_LABELS
from sales_core.errors import SchemaResolutionError


def normalize_header(value: object) -> str:
    return str(value).lower().strip()


def resolve_column(headers: Iterable[object], aliases: Iterable[str]) -> Optional[str]:
    """Return the first header whose normalized form is one of ``aliases``.

    Headers are scanned in dataset order; alias order does not matter.
    """
    targets = {normalize_header(a) for a in aliases}
    for header in headers:
        if normalize_header(header) in targets:
            return header  # type: ignore[return-value]
    return None


@dataclass(frozen=True)
class ResolvedSchema:
    columns: Dict[str, Optional[str]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        return self.columns.get(name)

    def require(self, name: str, *, view: Optional[str] = None) -> str:
        column = self.columns.get(name)
        if column is None:
            hint = FIELD_LABELS.get(name, name)
            raise SchemaResolutionError(
                f"Coluna '{hint}' não encontrada. Verifique o cabeçalho do arquivo Excel.",
                field=name,
                view=view,
            )
        return column

    def missing(self) -> List[str]:
        return [name for name, column in self.columns.items() if column is None]

    def as_dict(self) -> Dict[str, Optional[str]]:
        return dict(self.columns)


def resolve_schema(
    headers: Sequence[object],
    alias_table: Mapping[str, Iterable[str]] = FIELD_ALIASES,
) -> ResolvedSchema:
    return ResolvedSchema(columns={name: resolve_column(headers, aliases) for name, aliases in alias_table.items()})
