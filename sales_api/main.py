from __future__ import annotations

import logging
import math
import uuid
from typing import Dict, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from sales_api.schemas import FilterSelectionsModel
from sales_core.data import SalesDataset, load_dataset
from sales_core.errors import FileReadError, LoadError
from sales_core.filters import FilterSelections, apply_filters, filter_options, normalize_filters
from sales_core.views import VIEWS, compute_view, render_dashboard


app = FastAPI(title="Sales Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Datasets live for the lifetime of the process only; the oldest is evicted past MAX_DATASETS.
MAX_DATASETS = 32
_DATASETS: Dict[str, SalesDataset] = {}


def _store(dataset: SalesDataset) -> str:
    dataset_id = uuid.uuid4().hex
    _DATASETS[dataset_id] = dataset
    while len(_DATASETS) > MAX_DATASETS:
        evicted = next(iter(_DATASETS))
        del _DATASETS[evicted]
        logger.info("evicted dataset %s", evicted)
    return dataset_id


def _filters_from_model(model: Optional[FilterSelectionsModel]) -> FilterSelections:
    return normalize_filters(model.model_dump() if model is not None else {})


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _not_found(dataset_id: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"Dataset '{dataset_id}' not found", "type": "NotFound"})


@app.post("/datasets")
async def upload_dataset(file: UploadFile = File(...)):
    try:
        content = await file.read()
    except Exception:
        logger.exception("upload read failed")
        return _error(FileReadError(f"Falha ao ler o arquivo {file.filename}."), 400)

    try:
        dataset = load_dataset(content, file.filename)
    except LoadError as exc:
        logger.warning("upload rejected: %s", exc)
        return _error(exc, 400)
    except Exception as exc:
        logger.exception("upload failed")
        return _error(exc, 500)

    dataset_id = _store(dataset)
    return _json(
        {
            "dataset_id": dataset_id,
            **dataset.summary(),
            "options": filter_options(dataset.frame, dataset.schema),
        }
    )


@app.get("/datasets/{dataset_id}")
def dataset_summary(dataset_id: str):
    dataset = _DATASETS.get(dataset_id)
    if dataset is None:
        return _not_found(dataset_id)
    return _json({"dataset_id": dataset_id, **dataset.summary()})


@app.delete("/datasets/{dataset_id}")
def drop_dataset(dataset_id: str):
    if _DATASETS.pop(dataset_id, None) is None:
        return _not_found(dataset_id)
    return Response(status_code=204)


@app.get("/datasets/{dataset_id}/options")
def dataset_options(dataset_id: str):
    dataset = _DATASETS.get(dataset_id)
    if dataset is None:
        return _not_found(dataset_id)
    return _json({"options": filter_options(dataset.frame, dataset.schema)})


@app.get("/views")
def list_views():
    return _json({"views": [{"name": v.name, "title": v.title, "kind": v.kind} for v in VIEWS.values()]})


@app.post("/datasets/{dataset_id}/views")
def dashboard(dataset_id: str, filters: Optional[FilterSelectionsModel] = None):
    dataset = _DATASETS.get(dataset_id)
    if dataset is None:
        return _not_found(dataset_id)
    f = _filters_from_model(filters)
    rows = int(len(apply_filters(dataset.frame, dataset.schema, f)))
    results = render_dashboard(dataset, f)
    return _json({"rows": rows, "views": {name: r.to_payload() for name, r in results.items()}})


@app.post("/datasets/{dataset_id}/views/{view}")
def single_view(dataset_id: str, view: str, filters: Optional[FilterSelectionsModel] = None):
    dataset = _DATASETS.get(dataset_id)
    if dataset is None:
        return _not_found(dataset_id)
    if view not in VIEWS:
        return JSONResponse(status_code=404, content={"error": f"Unknown view: {view}", "type": "NotFound"})
    return _json(compute_view(view, dataset, _filters_from_model(filters)).to_payload())


@app.post("/datasets/{dataset_id}/export")
def export_rows(dataset_id: str, filters: Optional[FilterSelectionsModel] = None):
    dataset = _DATASETS.get(dataset_id)
    if dataset is None:
        return _not_found(dataset_id)
    export_df = apply_filters(dataset.frame, dataset.schema, _filters_from_model(filters))
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=vendas_filtradas.csv"},
    )
