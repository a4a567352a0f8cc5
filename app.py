import asyncio
import logging
import time
import streamlit as st
from dotenv import load_dotenv

from reporting import builder, session
from reporting.advisor import estimate_grouping
from reporting.chart import reduce_chart
from reporting.client import ReportClient, ReportServiceError
from reporting.constants import DISPLAY_PREVIEW_ROWS
from reporting.data import classify_columns, format_bytes, numeric_columns, preview_dataframe, schema_dataframe
from reporting.interpreter import sort_rows, summary_text, toggle_sort
from reporting.loading import with_smart_loading
from reporting.plan import FilterOp, SortDirection
from reporting.telemetry import log_report_run, show_log_viewer_sidebar
from reporting.viz import make_downloads, render_chart, result_dataframe

# ---------- Boot ----------
load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("app")
client = ReportClient.from_settings()

st.set_page_config(page_title="ERP Export Analytics", layout="wide")
st.title("ERP Export Analytics")
st.caption("Upload an ERP export, build a grouped report, explore it as a table or chart.")

# ---------- Sidebar: Logs ----------
show_log_viewer_sidebar()

# ---------- Session ----------
session.ensure()


def call_service(fn, *args, message: str):
    """Run a blocking service call off the script thread, with a flicker-free busy notice."""
    placeholder = st.empty()

    def on_busy(busy: bool):
        if busy:
            placeholder.info(message)
        else:
            placeholder.empty()

    async def _run():
        return await with_smart_loading(asyncio.to_thread(fn, *args), on_busy=on_busy)

    return asyncio.run(_run())


def load_preview(fn, *args, message: str):
    token = session.sequencer().issue()
    try:
        preview = call_service(fn, *args, message=message)
    except ReportServiceError as e:
        if session.sequencer().is_latest(token):
            session.set_preview(None)
            st.session_state.error = str(e)
        return
    if not session.sequencer().is_latest(token):
        logger.info("discarding superseded preview response %s", token)
        return
    session.set_preview(preview)
    st.session_state.error = None


@st.cache_data(ttl=60, show_spinner=False)
def list_samples(_client: ReportClient, base_url: str):
    return [s.model_dump(by_alias=True) for s in _client.fetch_samples()]


# ---------- Sidebar: Data ----------
st.sidebar.header("Data Source")
mode = st.sidebar.radio("Choose data source", ["Sample dataset", "CSV (upload)"], index=0)

if mode == "Sample dataset":
    try:
        samples = list_samples(client, client.base_url)
    except ReportServiceError as e:
        samples = []
        st.sidebar.error(str(e))
    for sample in samples:
        label = f"{sample['title']} ({sample['rows']} rows)"
        if st.sidebar.button(label, key=f"sample-{sample['id']}"):
            load_preview(client.fetch_sample_preview, sample["id"], message="Loading sample...")
    if not samples:
        st.sidebar.caption("No samples available.")
else:
    file = st.sidebar.file_uploader("Upload a CSV file", type=["csv"])
    if file is not None and st.sidebar.button("Upload"):
        load_preview(client.upload_file, file.name, file, message="Uploading...")

# ---------- Status ----------
if st.session_state.error:
    st.error(st.session_state.error)

preview = st.session_state.preview
if preview is None:
    st.info("Pick a sample dataset or upload a CSV in the sidebar to begin.")
    st.stop()

# ---------- Preview ----------
st.subheader("Report Preview")
st.markdown(
    f"**File:** `{preview.file_name}` &nbsp; **Size:** `{format_bytes(preview.byte_size)}` "
    f"&nbsp; **ID:** `{preview.dataset_id}`"
)
st.dataframe(preview_dataframe(preview).head(DISPLAY_PREVIEW_ROWS), use_container_width=True)
st.caption(f"Showing first {len(preview.sample_rows)} rows for preview purposes.")
with st.expander("Schema summary", expanded=False):
    st.dataframe(schema_dataframe(preview), use_container_width=True, hide_index=True)

# ---------- Build report ----------
st.subheader("Build Report")
state = st.session_state.builder
key = preview.dataset_id
profiles = {p.name: p for p in classify_columns(preview)}
numeric = numeric_columns(preview)

col_group, col_metrics, col_filter = st.columns(3)

with col_group:
    st.markdown("**Group by**")
    picked = st.multiselect("Dimensions", options=list(preview.columns), default=list(state.group_by),
                            key=f"group_by-{key}")
    for column in state.group_by:
        if column not in picked:
            state = builder.remove_dimension(state, column)
    for column in picked:
        state = builder.add_dimension(state, column)

    for column in state.group_by:
        if profiles[column].is_high_cardinality:
            st.caption(f"`{column}` appears to contain mostly unique values.")
    advice = estimate_grouping(preview, state.group_by)
    if advice.is_high_cardinality:
        st.warning(
            f"This grouping yields {advice.group_count} groups across {advice.sample_size} sample rows; "
            "expect close to one group per row."
        )

with col_metrics:
    st.markdown("**Metrics**")
    for i, metric in enumerate(state.metrics):
        c1, c2 = st.columns([4, 1])
        c1.write(metric.label)
        if c2.button("Remove", key=f"metric-rm-{key}-{i}"):
            state = builder.remove_metric(state, i)
            st.session_state.builder = state
            st.rerun()

    ops = (["count"] if builder.can_add_count(state) else []) + ["sum", "avg"]
    op = st.selectbox("Aggregation", ops, key=f"metric-op-{key}",
                      format_func=lambda o: {"count": "Count rows", "sum": "Sum", "avg": "Average"}[o])
    field = None
    if op != "count":
        fields = builder.available_metric_fields(state, op, numeric)
        if fields:
            field = st.selectbox("Numeric field", fields, key=f"metric-field-{key}")
        else:
            st.caption("No numeric fields left to aggregate.")
    if st.button("Add metric", key=f"metric-add-{key}"):
        state = builder.add_metric(state, op, field)
        st.session_state.builder = state
        st.rerun()
    if not state.metrics:
        st.caption("No metrics selected; the report will count rows.")

with col_filter:
    st.markdown("**Filter (optional)**")
    for i, f in enumerate(state.filters):
        c1, c2 = st.columns([4, 1])
        c1.write(f"{f.field} {'equals' if f.op == FilterOp.EQUALS else 'contains'} `{f.value}`")
        if c2.button("Remove", key=f"filter-rm-{key}-{i}"):
            state = builder.remove_filter(state, i)
            st.session_state.builder = state
            st.rerun()

    draft_field = st.selectbox("Column", [""] + list(preview.columns), key=f"filter-field-{key}",
                               format_func=lambda c: c or "Select column")
    draft_op = st.selectbox("Operator", [FilterOp.EQUALS, FilterOp.CONTAINS], key=f"filter-op-{key}",
                            format_func=lambda o: "equals" if o == FilterOp.EQUALS else "contains")
    draft_value = st.text_input("Value", key=f"filter-value-{key}")
    state = builder.stage_filter(state, draft_field, draft_op, draft_value)
    if st.button("Add filter", key=f"filter-add-{key}"):
        added = builder.add_filter(state)
        if added is not state:
            for widget in (f"filter-field-{key}", f"filter-op-{key}", f"filter-value-{key}"):
                del st.session_state[widget]
        st.session_state.builder = added
        st.rerun()

st.session_state.builder = state

# ---------- Run ----------
if st.button("Run Report", type="primary"):
    config = builder.build_submittable(state)
    token = session.sequencer().issue()
    started = time.perf_counter()
    try:
        result = call_service(client.run_report, preview.dataset_id, config, message="Running report...")
    except ReportServiceError as e:
        log_report_run(preview.dataset_id, config, time.perf_counter() - started, error=str(e))
        if session.sequencer().is_latest(token):
            session.clear_result()
            st.session_state.error = str(e)
            st.rerun()
    else:
        log_report_run(preview.dataset_id, config, time.perf_counter() - started, groups=len(result.rows))
        if session.sequencer().is_latest(token):
            session.set_result(result)
        else:
            logger.info("discarding superseded report response %s", token)

# ---------- Results ----------
result = st.session_state.result
view = st.session_state.result_view
if result is None:
    st.stop()

st.subheader("Report Results")
if view.is_empty:
    st.info("No results found. No results match your filters.")
    st.stop()

st.caption(summary_text(result))

c1, c2 = st.columns([3, 1])
with c1:
    if view.measure_indices:
        metric_idx = st.selectbox(
            "Metric", view.measure_indices,
            index=view.measure_indices.index(st.session_state.metric_index)
            if st.session_state.metric_index in view.measure_indices else 0,
            format_func=lambda i: result.columns[i],
        )
        st.session_state.metric_index = metric_idx
with c2:
    display = st.radio("View", ["Table", "Chart"], horizontal=True)

if display == "Table":
    s1, s2 = st.columns([3, 1])
    current = st.session_state.sort
    sort_col = s1.selectbox(
        "Sort by", list(range(len(result.columns))),
        index=current.column_index if current else 0,
        format_func=lambda i: result.columns[i],
    )
    arrow = ""
    if current and current.column_index == sort_col:
        arrow = " (desc)" if current.direction == SortDirection.DESC else " (asc)"
    if s2.button(f"Sort{arrow}"):
        st.session_state.sort = toggle_sort(current, sort_col)
        st.rerun()

    table = result_dataframe(result.columns, sort_rows(result.rows, st.session_state.sort))
    st.dataframe(table, use_container_width=True, hide_index=True)
    make_downloads(table, f"report-{preview.dataset_id}")
else:
    metric_idx = st.session_state.metric_index
    series = reduce_chart(result, metric_idx if metric_idx is not None else -1, view.dimension_indices)
    render_chart(series)
