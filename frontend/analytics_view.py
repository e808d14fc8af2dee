# frontend/analytics_view.py
"""
Analytics page model.

``build_analytics_view`` turns whatever the analytics collaborator exposes
(``analytics``, ``loading``, ``error``) into a plain view model. No
aggregation happens here; missing snapshot fields fall back to zero or an
empty series. Loading takes precedence over error, error over data.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

ERROR_TITLE = "Error Loading Analytics"
ERROR_MESSAGE = "Failed to load analytics data"


@dataclass
class MetricCard:
    title: str
    value: str
    caption: str
    icon: str


@dataclass
class ChartPanel:
    key: str
    tab: str
    title: str
    description: str
    kind: str  # bar | pie | line
    data: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class LoadingView:
    pass


@dataclass
class ErrorView:
    title: str = ERROR_TITLE
    message: str = ERROR_MESSAGE


@dataclass
class ReadyView:
    metrics: List[MetricCard]
    charts: List[ChartPanel]

    def chart(self, key) -> ChartPanel:
        return next(c for c in self.charts if c.key == key)


AnalyticsView = Union[LoadingView, ErrorView, ReadyView]


def _number(value, default=0):
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else default


def _series(snapshot, key) -> List[Dict[str, Any]]:
    value = snapshot.get(key)
    return list(value) if isinstance(value, list) else []


def _fmt(value) -> str:
    # 12.0 -> "12", 12.5 -> "12.5"
    return f"{value:g}" if isinstance(value, float) else str(value)


def build_metrics(snapshot: Dict[str, Any]) -> List[MetricCard]:
    key_metrics = snapshot.get("key_metrics") or {}
    total = _number(key_metrics.get("total_missions"))
    hours = _number(key_metrics.get("flight_hours"))
    rate = key_metrics.get("success_rate")
    drones = len(_series(snapshot, "drone_utilization"))

    if isinstance(rate, (int, float)) and not isinstance(rate, bool):
        rate_text = f"{rate:.1f}%"
    else:
        rate_text, rate = "0%", 0
    completed = round(total * rate / 100)

    return [
        MetricCard("Total Missions", _fmt(total), "Missions planned in this period", "🎯"),
        MetricCard("Active Drones", str(drones), f"{drones} total drones", "🛩️"),
        MetricCard("Flight Hours", f"{_fmt(hours)}h", "Time in the air this period", "🕒"),
        MetricCard("Success Rate", rate_text, f"{completed} completed missions", "📈"),
    ]


def build_charts(snapshot: Dict[str, Any]) -> List[ChartPanel]:
    return [
        ChartPanel("missions", "Mission Trends", "Mission Completion Trends",
                   "Track mission completion rates over time",
                   "bar", _series(snapshot, "mission_data")),
        ChartPanel("drones", "Drone Performance", "Drone Performance Metrics",
                   "Monitor individual drone performance and efficiency",
                   "pie", _series(snapshot, "drone_utilization")),
        ChartPanel("sites", "Site Analytics", "Site Activity Analysis",
                   "Analyze mission activity across different sites",
                   "line", _series(snapshot, "site_activity")),
        ChartPanel("battery", "Battery Trends", "Battery Level Trends",
                   "Monitor average battery levels throughout the day",
                   "line", _series(snapshot, "battery_trend")),
    ]


def build_analytics_view(source) -> AnalyticsView:
    """Map the collaborator's state onto exactly one of the three views."""
    if getattr(source, "loading", False):
        return LoadingView()
    if getattr(source, "error", None) is not None:
        return ErrorView()

    snapshot = getattr(source, "analytics", None) or {}
    return ReadyView(metrics=build_metrics(snapshot), charts=build_charts(snapshot))
