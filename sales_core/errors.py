from __future__ import annotations

from typing import Optional


class SalesDashboardError(Exception):
    """Base class for every error raised by the dashboard core."""


# ---------------- Load step ----------------
class LoadError(SalesDashboardError):
    pass


class FileReadError(LoadError):
    pass


class SheetNotFoundError(LoadError):
    pass


class EmptyDataError(LoadError):
    pass


# ---------------- View step ----------------
class ViewError(SalesDashboardError):
    status = "error"

    def __init__(self, message: str, *, view: Optional[str] = None) -> None:
        super().__init__(message)
        self.view = view


class NoDatasetError(ViewError):
    status = "no_data"


class EmptyFilterResultError(ViewError):
    status = "empty_after_filter"


class SchemaResolutionError(ViewError):
    status = "schema_error"

    def __init__(self, message: str, *, field: str, view: Optional[str] = None) -> None:
        super().__init__(message, view=view)
        self.field = field


class EmptyAggregateError(ViewError):
    status = "empty_aggregate"
