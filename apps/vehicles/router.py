from fastapi import APIRouter, Depends, status
from typing import List

from apps.vehicles.schemas import VehicleCreate, VehicleUpdate, VehicleResponse
from apps.vehicles.services import VehicleService, get_vehicle_service
from apps.auth.services import get_current_client
from apps.auth.models import UserModel

router = APIRouter()


@router.get("/", response_model=List[VehicleResponse], summary="List my vehicles")
def list_vehicles(
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    return service.get_vehicles(client)

@router.get("/my-vehicles", response_model=List[VehicleResponse], summary="List my vehicles")
def list_my_vehicles(
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    return service.get_vehicles(client)

@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(
    vehicle_id: int,
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    return service.get_owned_vehicle(vehicle_id, client)

@router.post("/", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
def add_vehicle(
    vehicle: VehicleCreate,
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    return service.create_vehicle(vehicle, client)

@router.put("/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: int,
    vehicle_update: VehicleUpdate,
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    return service.update_vehicle(vehicle_id, vehicle_update, client)

@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    service: VehicleService = Depends(get_vehicle_service),
    client: UserModel = Depends(get_current_client)
):
    """Vehicles that still have service requests cannot be removed"""
    return service.delete_vehicle(vehicle_id, client)
