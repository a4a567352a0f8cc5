import json
import logging
import re
import time
from pathlib import Path
import streamlit as st

from .plan import ReportConfig

logger = logging.getLogger(__name__)

LOG_DIR = Path(".cache")
LOG_FILE = LOG_DIR / "report_runs.jsonl"

REDACTION_PATTERNS = [
    re.compile(r"\b\d{12,19}\b"),
    re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"),
]


def redact(text: str) -> str:
    out = text
    for pat in REDACTION_PATTERNS:
        out = pat.sub("[REDACTED]", out)
    return out


def _redact_obj(obj):
    if isinstance(obj, str):
        return redact(obj)
    if isinstance(obj, dict):
        return {k: _redact_obj(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_redact_obj(v) for v in obj]
    return obj


def log_event(event: dict, log_file: Path = LOG_FILE) -> None:
    event = _redact_obj({"ts": round(time.time(), 3), **event})
    log_file.parent.mkdir(exist_ok=True)
    with log_file.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event, ensure_ascii=False) + "\n")


def log_report_run(report_id: str, config: ReportConfig, elapsed_sec: float,
                   groups: int | None = None, error: str | None = None, log_file: Path = LOG_FILE) -> None:
    logger.info("report %s ran in %.3fs (groups=%s, error=%s)", report_id, elapsed_sec, groups, error)
    log_event({
        "event": "report_run",
        "report_id": report_id,
        "config": config.to_payload(),
        "elapsed_sec": round(elapsed_sec, 3),
        "groups": groups,
        "error": error,
    }, log_file)


def read_events(limit: int = 200, log_file: Path = LOG_FILE) -> list:
    if not log_file.exists():
        return []
    with log_file.open("r", encoding="utf-8") as f:
        return f.readlines()[-limit:]


def show_log_viewer_sidebar():
    st.sidebar.header("Run log")
    if st.sidebar.button("Refresh log"):
        st.rerun()
    lines = read_events()
    if lines:
        st.sidebar.caption("Recent report runs (redacted):")
        for ln in reversed(lines):
            st.sidebar.code(ln.strip(), language="json")
    else:
        st.sidebar.caption("No runs yet.")
