from typing import Sequence

import pandas as pd
import plotly.express as px
import streamlit as st

from .chart import ChartSeries, NotChartable, axis_label, format_compact, tooltip_label


def series_dataframe(series: ChartSeries) -> pd.DataFrame:
    return pd.DataFrame({
        "pos": list(range(len(series.points))),
        "name": [p.name for p in series.points],
        "value": [p.value for p in series.points],
        "tooltip": [tooltip_label(p.name) for p in series.points],
        "text": [format_compact(p.value) for p in series.points],
    })


def build_figure(series: ChartSeries):
    # bars are placed by position so equal labels stay separate bars
    data = series_dataframe(series)
    positions = data["pos"].tolist()
    ticks = [axis_label(n) for n in data["name"]]
    if series.horizontal:
        fig = px.bar(data, x="value", y="pos", orientation="h", text="text", custom_data=["tooltip"])
        # largest bar on top
        fig.update_yaxes(autorange="reversed", tickmode="array", tickvals=positions, ticktext=ticks, title=None)
        fig.update_xaxes(title=series.metric_label)
    else:
        fig = px.bar(data, x="pos", y="value", text="text", custom_data=["tooltip"])
        fig.update_xaxes(tickmode="array", tickvals=positions, ticktext=ticks, title=None)
        fig.update_yaxes(title=series.metric_label)
    value_ref = "%{x}" if series.horizontal else "%{y}"
    fig.update_traces(hovertemplate="%{customdata[0]}<br>" + value_ref + "<extra></extra>")
    fig.update_layout(margin=dict(t=10, r=30, l=40 if series.horizontal else 0, b=0 if series.horizontal else 20))
    return fig


def render_chart(series):
    if isinstance(series, NotChartable):
        st.subheader("Cannot render chart")
        st.caption(series.reason)
        return None
    fig = build_figure(series)
    st.plotly_chart(fig, use_container_width=True)
    return fig


def result_dataframe(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    return pd.DataFrame([list(r) for r in rows], columns=list(columns))


def make_downloads(table: pd.DataFrame, download_name: str):
    csv_bytes = table.to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download table (CSV)",
        data=csv_bytes,
        file_name=f"{download_name}.csv",
        mime="text/csv",
    )
