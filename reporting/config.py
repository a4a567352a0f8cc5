import os
import streamlit as st
from streamlit.runtime.secrets import StreamlitSecretNotFoundError

from .constants import DEFAULT_API_TIMEOUT_SEC, DEFAULT_API_URL


def _lookup(name: str) -> str | None:
    # Try Streamlit secrets first; if not configured, fall back to environment (.env)
    try:
        if name in st.secrets:
            return str(st.secrets[name])
    except StreamlitSecretNotFoundError:
        pass
    return os.getenv(name)


def get_api_base_url() -> str:
    return (_lookup("REPORTS_API_URL") or DEFAULT_API_URL).rstrip("/")


def get_api_timeout() -> float:
    raw = _lookup("REPORTS_API_TIMEOUT")
    try:
        return float(raw) if raw else float(DEFAULT_API_TIMEOUT_SEC)
    except ValueError:
        return float(DEFAULT_API_TIMEOUT_SEC)
