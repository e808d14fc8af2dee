# ===============================================================
# backend/app/analytics.py
# ===============================================================
"""
Aggregation of missions, drones, sites and telemetry into the
analytics snapshot served by GET /analytics.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from .models import (
    AnalyticsSnapshot, BatteryTrendPoint, Drone, DroneUtilizationPoint,
    FINISHED_STATUSES, KeyMetrics, Mission, MissionTrendPoint, Site,
    SiteActivityPoint, Telemetry,
)

RANGE_DAYS = (7, 30, 90)


# ===============================================================
# 🔢 Helpers
# ===============================================================

def flight_hours(mission: Mission) -> float:
    """Hours flown by a finished mission, 0 for anything else."""
    if mission.status not in FINISHED_STATUSES:
        return 0.0
    if mission.started_at is None or mission.completed_at is None:
        return 0.0
    return max((mission.completed_at - mission.started_at).total_seconds(), 0.0) / 3600


def success_rate(missions: Iterable[Mission]) -> float:
    """Completed / finished, as a percentage. 0 when nothing finished."""
    completed = failed = 0
    for m in missions:
        if m.status == "completed":
            completed += 1
        elif m.status == "failed":
            failed += 1
    finished = completed + failed
    return round(completed / finished * 100, 1) if finished else 0.0


def period_label(ts: datetime, range_days: int) -> str:
    # Daily buckets up to a month, ISO weeks beyond that
    if range_days <= 30:
        return ts.strftime("%Y-%m-%d")
    year, week, _ = ts.isocalendar()
    return f"{year}-W{week:02d}"


# ===============================================================
# 📊 Series builders
# ===============================================================

def mission_trend(missions: List[Mission], range_days: int) -> List[MissionTrendPoint]:
    buckets: Dict[str, MissionTrendPoint] = {}
    for m in missions:
        label = period_label(m.created_at, range_days)
        point = buckets.setdefault(label, MissionTrendPoint(period=label))
        if m.status == "completed":
            point.completed += 1
        elif m.status == "failed":
            point.failed += 1
        elif m.status in ("planned", "in_progress"):
            point.in_progress += 1
    return [buckets[k] for k in sorted(buckets)]


def drone_utilization(drones: List[Drone], missions: List[Mission],
                      range_days: int) -> List[DroneUtilizationPoint]:
    """Share of the range each drone spent flying, one entry per drone."""
    hours = defaultdict(float)
    for m in missions:
        hours[m.drone_id] += flight_hours(m)

    range_hours = range_days * 24
    return [
        DroneUtilizationPoint(
            drone=d.name,
            utilization=round(min(hours[d.id] / range_hours * 100, 100.0), 1),
        )
        for d in drones
    ]


def site_activity(sites: Dict[int, Site], missions: List[Mission]) -> List[SiteActivityPoint]:
    by_site = defaultdict(list)
    for m in missions:
        by_site[m.site_id].append(m)

    points = []
    for site_id, site_missions in by_site.items():
        site = sites.get(site_id)
        points.append(SiteActivityPoint(
            site=site.name if site else f"Site {site_id}",
            missions=len(site_missions),
            success_rate=success_rate(site_missions),
        ))
    return sorted(points, key=lambda p: p.site)


def battery_trend(samples: List[Telemetry]) -> List[BatteryTrendPoint]:
    """Average battery level by hour of day."""
    by_hour = defaultdict(list)
    for s in samples:
        by_hour[s.timestamp.hour].append(s.battery)
    return [
        BatteryTrendPoint(time=f"{hour:02d}:00", avg_battery=round(sum(v) / len(v), 1))
        for hour, v in sorted(by_hour.items())
    ]


# ===============================================================
# 🧮 Snapshot
# ===============================================================

def build_snapshot(session: Session, range_days: int = 7,
                   now: Optional[datetime] = None) -> AnalyticsSnapshot:
    """
    Aggregate everything created within the last ``range_days`` days.

    Raises ValueError for a range outside RANGE_DAYS.
    """
    if range_days not in RANGE_DAYS:
        raise ValueError(f"range_days must be one of {RANGE_DAYS}")

    now = now or datetime.utcnow()
    since = now - timedelta(days=range_days)

    missions = session.exec(select(Mission).where(Mission.created_at >= since)).all()
    drones = session.exec(select(Drone).order_by(Drone.id)).all()
    sites = {s.id: s for s in session.exec(select(Site)).all()}
    samples = session.exec(select(Telemetry).where(Telemetry.timestamp >= since)).all()

    metrics = KeyMetrics(
        total_missions=len(missions),
        flight_hours=round(sum(flight_hours(m) for m in missions), 1),
        success_rate=success_rate(missions),
    )

    return AnalyticsSnapshot(
        range_days=range_days,
        generated_at=now,
        key_metrics=metrics,
        mission_data=mission_trend(missions, range_days),
        drone_utilization=drone_utilization(drones, missions, range_days),
        site_activity=site_activity(sites, missions),
        battery_trend=battery_trend(samples),
    )
