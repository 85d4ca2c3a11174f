from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional

from apps.mechanics.schemas import MechanicUpdate, AvailabilityUpdate, MechanicResponse, MechanicListResponse
from apps.mechanics.services import MechanicService, get_mechanic_service
from apps.auth.services import get_current_mechanic
from apps.auth.models import UserModel

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{mechanic_id}) ============

@router.get("/", response_model=MechanicListResponse, summary="List mechanics")
def list_mechanics(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    specialization: Optional[str] = Query(None, description="Filter by specialization"),
    service_area: Optional[str] = Query(None, description="Filter by service area"),
    verified: Optional[bool] = Query(None, description="Only verified / unverified mechanics"),
    service: MechanicService = Depends(get_mechanic_service)
):
    """Public directory of mechanics, best rated first"""
    mechanics, total = service.get_mechanics(
        skip=skip,
        limit=limit,
        specialization=specialization,
        service_area=service_area,
        verified=verified
    )
    return MechanicListResponse(items=mechanics, total=total)

@router.get("/me", response_model=MechanicResponse)
def get_my_profile(
    service: MechanicService = Depends(get_mechanic_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    return service.mechanic_to_response(service.get_profile_for(mechanic))

@router.put("/me", response_model=MechanicResponse)
def update_my_profile(
    update: MechanicUpdate,
    service: MechanicService = Depends(get_mechanic_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    return service.mechanic_to_response(service.update_profile(mechanic, update))

@router.put("/availability", response_model=MechanicResponse)
def update_my_availability(
    update: AvailabilityUpdate,
    service: MechanicService = Depends(get_mechanic_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    return service.mechanic_to_response(service.update_availability(mechanic, update))

# ============ DYNAMIC ROUTES ============

@router.get("/{mechanic_id}", response_model=MechanicResponse)
def get_mechanic(mechanic_id: int, service: MechanicService = Depends(get_mechanic_service)):
    mechanic = service.get_mechanic(mechanic_id)
    if not mechanic:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mechanic not found")
    return service.mechanic_to_response(mechanic)
