"""Simulation session endpoints: state, start/pause/reset, speed."""
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Header
from pydantic import BaseModel
from loguru import logger
from services.simulation_service import SimulationService, SimulationSnapshot
from services.observer_registry import ObserverRegistry
from storage.session_store import open_store, SessionStoreError, SessionConflictError
from data_processing.sample_data import SAMPLE_ROUTES, SAMPLE_TRUCKS
from models.simulation_models import SessionClock, TruckState
from configurations.config import Config

router = APIRouter(prefix="/api/simulation", tags=["simulation"])

_observer_registry: Optional[ObserverRegistry] = None

class SpeedRequest(BaseModel):
    multiplier: float

class TruckSpeedRequest(BaseModel):
    speed_kmh: float

def set_observer_registry(registry: Optional[ObserverRegistry]) -> None:
    global _observer_registry
    _observer_registry = registry

def get_observer_registry() -> ObserverRegistry:
    """Lazily open the store named by Config.DATABASE_URL and seed it once."""
    global _observer_registry
    if _observer_registry is None:
        try:
            store = open_store(Config.DATABASE_URL)
            store.seed(SAMPLE_ROUTES, SAMPLE_TRUCKS, SessionClock(session_id=Config.SESSION_ID, truck_id='truck1'))
        except SessionStoreError as e:
            raise HTTPException(status_code=503, detail=f"Session store unavailable: {str(e)}")
        _observer_registry = ObserverRegistry(store)
    return _observer_registry

def get_simulation_service(x_observer_id: Optional[str] = Header(None),
                           registry: ObserverRegistry = Depends(get_observer_registry)) -> SimulationService:
    """The calling client's own observer, picked by the X-Observer-Id header."""
    return registry.get(x_observer_id)

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def session_payload(session: Optional[SessionClock]) -> Optional[dict]:
    return asdict(session) if session else None

def truck_payload(state: TruckState) -> dict:
    return {
        "truck_id": state.truck_id,
        "name": state.name,
        "route_id": state.route_id,
        "speed_kmh": state.speed_kmh,
        "position": list(state.position) if state.position else None,
        "progress": state.progress,
        "status": state.status
    }

def snapshot_payload(snapshot: SimulationSnapshot) -> dict:
    return {
        "now": snapshot.now,
        "session": session_payload(snapshot.session),
        "trucks": [truck_payload(s) for s in snapshot.trucks],
        "citizens": [asdict(c) for c in snapshot.citizens],
        "notifications": [asdict(n) for n in snapshot.notifications]
    }

def current_snapshot(service: SimulationService) -> SimulationSnapshot:
    service.refresh()
    return service.tick(utc_now())

def _run_action(action, *args) -> SessionClock:
    try:
        return action(*args)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SessionStoreError as e:
        logger.error(f"Session write failed: {e}")
        raise HTTPException(status_code=503, detail=f"Session store unavailable: {str(e)}")

@router.get("/state")
async def get_state(service: SimulationService = Depends(get_simulation_service)):
    """Trucks, citizens and notifications recomputed for the current instant."""
    return {"status": "success", "data": snapshot_payload(current_snapshot(service))}

@router.post("/start")
async def start_simulation(service: SimulationService = Depends(get_simulation_service)):
    session = _run_action(service.start, utc_now())
    return {"status": "success", "message": "Simulation started", "session": session_payload(session)}

@router.post("/pause")
async def pause_simulation(service: SimulationService = Depends(get_simulation_service)):
    session = _run_action(service.pause, utc_now())
    return {"status": "success", "message": "Simulation paused", "session": session_payload(session)}

@router.post("/reset")
async def reset_simulation(service: SimulationService = Depends(get_simulation_service)):
    session = _run_action(service.reset, utc_now())
    return {"status": "success", "message": "Simulation reset", "session": session_payload(session)}

@router.put("/speed")
async def set_simulation_speed(request: SpeedRequest,
                               service: SimulationService = Depends(get_simulation_service)):
    session = _run_action(service.set_speed, request.multiplier, utc_now())
    return {
        "status": "success",
        "message": f"Speed multiplier set to {request.multiplier}x",
        "session": session_payload(session)
    }

@router.get("/trucks")
async def list_trucks(service: SimulationService = Depends(get_simulation_service)):
    snapshot = current_snapshot(service)
    trucks = [truck_payload(s) for s in snapshot.trucks]
    return {"status": "success", "count": len(trucks), "data": trucks}

@router.put("/trucks/{truck_id}/speed")
async def update_truck_speed(truck_id: str, request: TruckSpeedRequest,
                             service: SimulationService = Depends(get_simulation_service)):
    try:
        truck = service.update_truck_speed(truck_id, request.speed_kmh)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionStoreError as e:
        raise HTTPException(status_code=503, detail=f"Session store unavailable: {str(e)}")

    if truck is None:
        raise HTTPException(status_code=404, detail=f"Truck {truck_id} not found")

    return {
        "status": "success",
        "message": f"Truck {truck_id} speed updated to {request.speed_kmh} km/h",
        "data": asdict(truck)
    }
