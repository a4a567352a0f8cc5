import streamlit as st
from typing import Any, Dict

from .builder import new_state
from .interpreter import interpret_result
from .plan import PreviewDataset, ReportResult
from .sequence import RequestSequencer

DEFAULTS: Dict[str, Any] = {
    "preview": None,
    "builder": None,
    "result": None,
    "result_view": None,
    "sort": None,
    "metric_index": None,
    "error": None,
}


def ensure():
    for key, value in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value
    if "sequencer" not in st.session_state:
        st.session_state["sequencer"] = RequestSequencer()


def sequencer() -> RequestSequencer:
    ensure()
    return st.session_state["sequencer"]


def clear_result():
    for key in ("result", "result_view", "sort", "metric_index"):
        st.session_state[key] = None


def set_preview(preview: PreviewDataset | None):
    """Replace the dataset wholesale; the builder and any result belong to the old one."""
    st.session_state.preview = preview
    st.session_state.builder = new_state(preview.columns) if preview else None
    clear_result()


def set_result(result: ReportResult):
    view = interpret_result(result)
    st.session_state.result = result
    st.session_state.result_view = view
    st.session_state.sort = view.sort
    st.session_state.metric_index = view.metric_index
    st.session_state.error = None
