# ===============================================================
# backend/app/models.py
# ===============================================================
"""
Data models for the Drone Ops Dashboard backend.
Defines SQLModel ORM tables for:
 - Sites
 - Drones
 - Missions
 - Telemetry
and the request/response schemas used by the API (site creation,
analytics snapshot).
"""

from typing import List, Optional
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field
from datetime import datetime


# ===============================================================
# 📍 SITES
# ===============================================================

class SiteBase(SQLModel):
    name: str = Field(min_length=1, index=True, description="Site display name")
    description: Optional[str] = Field(default="", description="Free-form site notes")
    latitude: float = Field(ge=-90, le=90, description="Site latitude (degrees)")
    longitude: float = Field(ge=-180, le=180, description="Site longitude (degrees)")
    altitude: Optional[float] = Field(default=0.0, description="Site altitude (m)")
    is_active: bool = Field(default=True, description="Whether missions may be planned at this site")


class SiteCreate(SiteBase):
    """
    Payload accepted by POST /sites.
    Validated by FastAPI before it reaches the CRUD layer. Surrounding
    whitespace is stripped, so a blank name is rejected.
    """
    model_config = ConfigDict(str_strip_whitespace=True)


class Site(SiteBase, table=True):
    """
    Represents an operational location against which missions are planned.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp (UTC)")


# ===============================================================
# 🛩️ DRONES
# ===============================================================

class Drone(SQLModel, table=True):
    """
    Represents a physical drone entity with its operational state.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, description="Unique name or identifier for the drone")
    battery_level: int = Field(default=100, ge=0, le=100, description="Battery percentage (0–100)")
    status: str = Field(default="available", description="Drone state: available | in_mission | maintenance")


# ===============================================================
# 🚀 MISSIONS
# ===============================================================

MISSION_STATUSES = ("planned", "in_progress", "completed", "failed", "aborted")
FINISHED_STATUSES = ("completed", "failed")


class Mission(SQLModel, table=True):
    """
    A drone flying (or scheduled to fly) at a site.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    drone_id: int = Field(foreign_key="drone.id", description="Assigned drone ID")
    site_id: int = Field(foreign_key="site.id", description="Site the mission is flown at")
    status: str = Field(default="planned", description="Mission status: planned | in_progress | completed | failed | aborted")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="When the mission was planned (UTC)")
    started_at: Optional[datetime] = Field(default=None, description="Start timestamp of mission")
    completed_at: Optional[datetime] = Field(default=None, description="Completion timestamp of mission")


# ===============================================================
# 📡 TELEMETRY
# ===============================================================

class Telemetry(SQLModel, table=True):
    """
    One battery/position sample reported by a drone.
    Samples are appended, never overwritten, so battery history is kept.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    drone_id: int = Field(foreign_key="drone.id", description="Drone ID reference")
    battery: int = Field(default=100, ge=0, le=100, description="Battery percentage at sample time")
    latitude: float = Field(default=0.0, description="GPS latitude")
    longitude: float = Field(default=0.0, description="GPS longitude")
    altitude: float = Field(default=0.0, description="Altitude (m)")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Telemetry timestamp (UTC)")


# ===============================================================
# 📊 ANALYTICS SNAPSHOT
# ===============================================================

class KeyMetrics(SQLModel):
    total_missions: int = 0
    flight_hours: float = 0.0
    success_rate: float = 0.0


class MissionTrendPoint(SQLModel):
    period: str
    completed: int = 0
    failed: int = 0
    in_progress: int = 0


class DroneUtilizationPoint(SQLModel):
    drone: str
    utilization: float


class SiteActivityPoint(SQLModel):
    site: str
    missions: int
    success_rate: float


class BatteryTrendPoint(SQLModel):
    time: str  # "HH:00"
    avg_battery: float


class AnalyticsSnapshot(SQLModel):
    """Pre-aggregated analytics returned by GET /analytics."""

    range_days: int
    generated_at: datetime
    key_metrics: KeyMetrics
    mission_data: List[MissionTrendPoint] = []
    drone_utilization: List[DroneUtilizationPoint] = []
    site_activity: List[SiteActivityPoint] = []
    battery_trend: List[BatteryTrendPoint] = []
