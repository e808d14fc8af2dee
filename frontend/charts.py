# frontend/charts.py
"""
Plotly figures for the four analytics chart panels.
"""
import plotly.graph_objects as go

from frontend.analytics_view import ChartPanel

PIE_COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444"]


def _column(rows, key, default=0):
    return [row.get(key, default) for row in rows]


def mission_trend_chart(rows) -> go.Figure:
    """Grouped bars: completed / failed / in progress per period."""
    periods = _column(rows, "period", "")
    fig = go.Figure()
    for key, name, color in (
        ("completed", "Completed", "#10b981"),
        ("failed", "Failed", "#ef4444"),
        ("in_progress", "In Progress", "#3b82f6"),
    ):
        fig.add_trace(go.Bar(name=name, x=periods, y=_column(rows, key), marker_color=color))
    fig.update_layout(barmode="group", height=300, margin=dict(t=20, b=20))
    return fig


def drone_utilization_chart(rows) -> go.Figure:
    """One pie segment per drone, labelled "<drone>: <n>%"."""
    labels = _column(rows, "drone", "")
    values = _column(rows, "utilization")
    fig = go.Figure(go.Pie(
        labels=labels,
        values=values,
        text=[f"{d}: {u}%" for d, u in zip(labels, values)],
        textinfo="text",
        marker=dict(colors=[PIE_COLORS[i % len(PIE_COLORS)] for i in range(len(rows))]),
        sort=False,
    ))
    fig.update_layout(height=300, margin=dict(t=20, b=20))
    return fig


def site_activity_chart(rows) -> go.Figure:
    sites = _column(rows, "site", "")
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=sites, y=_column(rows, "missions"), mode="lines+markers",
                             name="Missions", line=dict(color="#3b82f6", shape="spline")))
    fig.add_trace(go.Scatter(x=sites, y=_column(rows, "success_rate"), mode="lines+markers",
                             name="Success Rate %", line=dict(color="#10b981", shape="spline")))
    fig.update_layout(height=300, margin=dict(t=20, b=20))
    return fig


def battery_trend_chart(rows) -> go.Figure:
    fig = go.Figure(go.Scatter(
        x=_column(rows, "time", ""),
        y=_column(rows, "avg_battery"),
        mode="lines",
        name="Average Battery %",
        line=dict(color="#f59e0b", width=2, shape="spline"),
    ))
    fig.update_layout(height=300, margin=dict(t=20, b=20), yaxis=dict(range=[0, 100]))
    return fig


CHART_BUILDERS = {
    "missions": mission_trend_chart,
    "drones": drone_utilization_chart,
    "sites": site_activity_chart,
    "battery": battery_trend_chart,
}


def build_figure(panel: ChartPanel) -> go.Figure:
    return CHART_BUILDERS[panel.key](panel.data)
