"""Citizen endpoints: status, ETA and the observed citizen."""
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from services.simulation_service import SimulationService
from api.simulation_api import get_simulation_service, current_snapshot

router = APIRouter(prefix="/api/citizens", tags=["citizens"])

class ObservedCitizenRequest(BaseModel):
    citizen_id: Optional[str] = None

@router.get("")
async def list_citizens(service: SimulationService = Depends(get_simulation_service)):
    snapshot = current_snapshot(service)
    citizens = [asdict(c) for c in snapshot.citizens]
    return {"status": "success", "count": len(citizens), "data": citizens}

@router.put("/observed")
async def set_observed_citizen(request: ObservedCitizenRequest,
                               service: SimulationService = Depends(get_simulation_service)):
    """Pick the citizen whose collection events produce notifications."""
    if not service.select_citizen(request.citizen_id):
        raise HTTPException(status_code=404, detail=f"Citizen {request.citizen_id} not found")
    return {"status": "success", "observed_citizen_id": request.citizen_id}

@router.get("/{citizen_id}")
async def get_citizen(citizen_id: str, service: SimulationService = Depends(get_simulation_service)):
    current_snapshot(service)
    citizen = service.get_citizen(citizen_id)
    if citizen is None:
        raise HTTPException(status_code=404, detail=f"Citizen {citizen_id} not found")
    return {"status": "success", "data": asdict(citizen)}

@router.get("/{citizen_id}/eta")
async def get_citizen_eta(citizen_id: str, service: SimulationService = Depends(get_simulation_service)):
    """ETA in minutes and distance in km to the nearest truck; null when unknown."""
    current_snapshot(service)
    citizen = service.get_citizen(citizen_id)
    if citizen is None:
        raise HTTPException(status_code=404, detail=f"Citizen {citizen_id} not found")

    return {
        "status": "success",
        "citizen_id": citizen_id,
        "collection_status": citizen.status,
        "eta_minutes": service.eta_for_citizen(citizen_id),
        "distance_km": service.distance_to_truck(citizen_id)
    }
