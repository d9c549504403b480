from __future__ import annotations

from typing import Any, MutableMapping, Optional

from sales_core.config import FILTER_DIMENSIONS

UPLOAD_KEY = "_upload_key"


def filter_widget_key(dimension: str) -> str:
    return f"filter_{dimension}"


def upload_identity(name: str, size: int, file_id: Optional[str] = None) -> str:
    """Identify an upload so a re-upload under the same name still counts as new."""
    return file_id or f"{name}:{size}"


def reset_for_upload(state: MutableMapping[str, Any], identity: str) -> bool:
    """Drop the loaded dataset and filter selections when ``identity`` changes.

    Returns True when the state was reset.
    """
    if state.get(UPLOAD_KEY) == identity:
        return False
    state[UPLOAD_KEY] = identity
    state.pop("dataset", None)
    state.pop("load_error", None)
    for dimension in FILTER_DIMENSIONS:
        state.pop(filter_widget_key(dimension), None)
    return True
