# ===============================================================
# backend/app/main.py
# ===============================================================

from fastapi import FastAPI, Depends, HTTPException, Query
from sqlmodel import Session
import logging
import os
from typing import List

from backend.app import crud, models
from backend.app.analytics import build_snapshot
from backend.app.database import init_db, get_session

# ===============================================================
# GLOBAL CONFIG
# ===============================================================

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Drone Ops API")

# ===============================================================
# STARTUP
# ===============================================================

@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Backend online.")


# ===============================================================
# SITES
# ===============================================================

@app.post("/sites", response_model=models.Site, status_code=201)
def create_site(site: models.SiteCreate, session: Session = Depends(get_session)):
    return crud.create_site(session, site)

@app.get("/sites", response_model=List[models.Site])
def list_sites(session: Session = Depends(get_session)):
    return crud.list_sites(session)

@app.get("/sites/{site_id}", response_model=models.Site)
def get_site(site_id: int, session: Session = Depends(get_session)):
    site = crud.get_site(session, site_id)
    if not site:
        raise HTTPException(404, "Site not found")
    return site

@app.delete("/sites/{site_id}")
def delete_site(site_id: int, session: Session = Depends(get_session)):
    try:
        success = crud.delete_site(session, site_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not success:
        raise HTTPException(404, "Site not found")
    return {"message": "Site deleted"}


# ===============================================================
# DRONES
# ===============================================================

@app.post("/drones", response_model=models.Drone, status_code=201)
def create_drone(name: str, battery_level: int = Query(100, ge=0, le=100),
                 session: Session = Depends(get_session)):
    return crud.create_drone(session, name, battery_level)

@app.get("/drones", response_model=List[models.Drone])
def list_drones(session: Session = Depends(get_session)):
    return crud.list_drones(session)

@app.delete("/drones/{drone_id}")
def delete_drone(drone_id: int, session: Session = Depends(get_session)):
    try:
        success = crud.delete_drone(session, drone_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not success:
        raise HTTPException(404, "Drone not found")
    return {"message": "Drone deleted"}


# ===============================================================
# MISSIONS
# ===============================================================

@app.post("/missions", response_model=models.Mission, status_code=201)
def create_mission(drone_id: int, site_id: int, session: Session = Depends(get_session)):
    try:
        return crud.create_mission(session, drone_id, site_id)
    except ValueError as e:
        raise HTTPException(400, str(e))

@app.get("/missions", response_model=List[models.Mission])
def list_missions(session: Session = Depends(get_session)):
    return crud.list_missions(session)

@app.post("/missions/{mission_id}/start", response_model=models.Mission)
def start_mission(mission_id: int, session: Session = Depends(get_session)):
    try:
        mission = crud.start_mission(session, mission_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not mission:
        raise HTTPException(404, "Mission not found")
    return mission

def _finish(mission_id: int, status: str, session: Session):
    try:
        mission = crud.finish_mission(session, mission_id, status)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not mission:
        raise HTTPException(404, "Mission not found")
    return mission

@app.post("/missions/{mission_id}/complete", response_model=models.Mission)
def complete_mission(mission_id: int, session: Session = Depends(get_session)):
    return _finish(mission_id, "completed", session)

@app.post("/missions/{mission_id}/fail", response_model=models.Mission)
def fail_mission(mission_id: int, session: Session = Depends(get_session)):
    return _finish(mission_id, "failed", session)


# ===============================================================
# TELEMETRY
# ===============================================================

@app.get("/telemetry", response_model=List[models.Telemetry])
def telemetry(session: Session = Depends(get_session)):
    return crud.get_all_telemetry(session)

@app.post("/telemetry", response_model=models.Telemetry, status_code=201)
def record_telemetry(
    drone_id: int,
    battery: int = Query(..., ge=0, le=100),
    latitude: float = Query(0.0, ge=-90, le=90),
    longitude: float = Query(0.0, ge=-180, le=180),
    altitude: float = 0.0,
    session: Session = Depends(get_session),
):
    try:
        return crud.record_telemetry(session, drone_id, battery, latitude, longitude, altitude)
    except ValueError as e:
        raise HTTPException(404, str(e))


# ===============================================================
# ANALYTICS
# ===============================================================

@app.get("/analytics", response_model=models.AnalyticsSnapshot)
def analytics(range_days: int = 7, session: Session = Depends(get_session)):
    try:
        return build_snapshot(session, range_days)
    except ValueError as e:
        raise HTTPException(422, str(e))
