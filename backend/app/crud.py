# ===============================================================
# backend/app/crud.py
# ===============================================================
"""
CRUD (Create, Read, Update, Delete) operations for the Drone Ops Dashboard.
Handles database logic for:
 - Sites
 - Drones
 - Missions
 - Telemetry
"""

from sqlmodel import Session, select
from datetime import datetime
import logging

from .models import Site, SiteCreate, Drone, Mission, Telemetry

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ["planned", "in_progress"]

# ===============================================================
# 📍 SITES
# ===============================================================

def create_site(session: Session, site_in: SiteCreate) -> Site:
    """Persist a validated site payload."""
    site = Site(**site_in.model_dump())
    session.add(site)
    session.commit()
    session.refresh(site)
    logger.info("Created site %s (%s)", site.id, site.name)
    return site

def list_sites(session: Session):
    """Return all sites."""
    return session.exec(select(Site)).all()

def get_site(session: Session, site_id: int):
    """Get a specific site."""
    return session.get(Site, site_id)

def delete_site(session: Session, site_id: int):
    """Delete a site (cannot delete while missions reference it)."""
    site = session.get(Site, site_id)
    if not site:
        return False
    used = session.exec(select(Mission).where(Mission.site_id == site_id)).first()
    if used:
        raise ValueError(f"Site {site_id} is referenced by mission {used.id}.")
    session.delete(site)
    session.commit()
    logger.info("Deleted site %s", site_id)
    return True

# ===============================================================
# 🛩️ DRONES
# ===============================================================

def create_drone(session: Session, name: str, battery_level: int = 100) -> Drone:
    """Create a new drone."""
    drone = Drone(name=name, battery_level=battery_level, status="available")
    session.add(drone)
    session.commit()
    session.refresh(drone)
    return drone

def list_drones(session: Session):
    """Return all drones."""
    return session.exec(select(Drone)).all()

def get_drone(session: Session, drone_id: int):
    """Get a specific drone."""
    return session.get(Drone, drone_id)

def delete_drone(session: Session, drone_id: int):
    """Delete a drone safely (cannot delete while in mission)."""
    drone = session.get(Drone, drone_id)
    if not drone:
        return False
    if drone.status == "in_mission":
        raise ValueError("Cannot delete a drone currently in mission.")
    session.delete(drone)
    session.commit()
    return True

# ===============================================================
# 🎯 MISSIONS
# ===============================================================

def create_mission(session: Session, drone_id: int, site_id: int) -> Mission:
    """Plan a mission for a drone at a site (one active mission per drone)."""
    drone = session.get(Drone, drone_id)
    if not drone:
        raise ValueError(f"Drone {drone_id} not found.")
    site = session.get(Site, site_id)
    if not site:
        raise ValueError(f"Site {site_id} not found.")
    if not site.is_active:
        raise ValueError(f"Site {site.name} is not active.")

    existing = session.exec(
        select(Mission)
        .where(Mission.drone_id == drone_id, Mission.status.in_(ACTIVE_STATUSES))
        .order_by(Mission.id.desc())
    ).first()
    if existing:
        raise ValueError(f"Drone {drone_id} already has an active mission (ID {existing.id})")

    drone.status = "in_mission"
    mission = Mission(drone_id=drone_id, site_id=site_id, status="planned")
    session.add_all([drone, mission])
    session.commit()
    session.refresh(mission)
    return mission

def list_missions(session: Session):
    """List all missions."""
    return session.exec(select(Mission)).all()

def start_mission(session: Session, mission_id: int):
    """Move a planned mission to in_progress."""
    mission = session.get(Mission, mission_id)
    if not mission:
        return None
    if mission.status != "planned":
        raise ValueError(f"Mission {mission_id} is {mission.status}, not planned.")
    mission.status = "in_progress"
    mission.started_at = datetime.utcnow()
    session.add(mission)
    session.commit()
    session.refresh(mission)
    return mission

def finish_mission(session: Session, mission_id: int, status: str):
    """Mark a mission completed or failed and release the drone."""
    mission = session.get(Mission, mission_id)
    if not mission:
        return None
    if mission.status not in ACTIVE_STATUSES:
        raise ValueError(f"Mission {mission_id} already finished ({mission.status}).")

    now = datetime.utcnow()
    mission.status = status
    if mission.started_at is None:
        mission.started_at = now
    mission.completed_at = now

    drone = session.get(Drone, mission.drone_id)
    if drone:
        drone.status = "available"
        session.add(drone)
    session.add(mission)
    session.commit()
    session.refresh(mission)
    logger.info("Mission %s %s", mission_id, status)
    return mission

# ===============================================================
# 📡 TELEMETRY
# ===============================================================

def record_telemetry(session: Session, drone_id: int, battery: int,
                     latitude: float = 0.0, longitude: float = 0.0, altitude: float = 0.0):
    """
    Append a telemetry sample and mirror the battery level onto the drone.
    """
    drone = session.get(Drone, drone_id)
    if not drone:
        raise ValueError(f"Drone {drone_id} not found.")

    sample = Telemetry(
        drone_id=drone_id,
        battery=battery,
        latitude=latitude,
        longitude=longitude,
        altitude=altitude,
        timestamp=datetime.utcnow(),
    )
    drone.battery_level = battery
    session.add_all([sample, drone])
    session.commit()
    session.refresh(sample)
    return sample

def get_all_telemetry(session: Session):
    """Return all telemetry samples."""
    return session.exec(select(Telemetry)).all()
