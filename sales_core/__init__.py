"""Core (UI-agnostic) sales dashboard logic.

This package contains:
- lenient cell coercion (currency / integer / date cells)
- header alias resolution
- data loading (XLSX -> records -> pandas)
- filter selections and filtering
- the aggregation engine and per-view configuration (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
- upload session bookkeeping for the Streamlit front-end
"""
