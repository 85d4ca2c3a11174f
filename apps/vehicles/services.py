from sqlalchemy.orm import Session
from typing import List, Optional
from fastapi import HTTPException, status, Depends
import logging

from apps.vehicles.models import Vehicle
from apps.vehicles.schemas import VehicleCreate, VehicleUpdate
from apps.auth.models import UserModel
from apps.auth.permissions import is_allowed
from core.database import get_db, commit_or_conflict

logger = logging.getLogger(__name__)

DUPLICATE_VIN = "Vehicle with this VIN already exists"


class VehicleService:
    def __init__(self, db: Session):
        self.db = db

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        return self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()

    def get_owned_vehicle(self, vehicle_id: int, user: UserModel, action: str = "view") -> Vehicle:
        """Vehicles of other users are reported as missing, not forbidden"""
        vehicle = self.get_vehicle(vehicle_id)
        if not vehicle or not is_allowed(user, vehicle, action):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
        return vehicle

    def get_vehicles(self, user: UserModel) -> List[Vehicle]:
        return (
            self.db.query(Vehicle)
            .filter(Vehicle.user_id == user.id)
            .order_by(Vehicle.created_at.desc())
            .all()
        )

    def vin_taken(self, vin: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Vehicle).filter(Vehicle.vin == vin)
        if exclude_id is not None:
            query = query.filter(Vehicle.id != exclude_id)
        return query.first() is not None

    def create_vehicle(self, vehicle: VehicleCreate, owner: UserModel) -> Vehicle:
        if self.vin_taken(vehicle.vin):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_VIN)

        db_vehicle = Vehicle(**vehicle.model_dump(), user_id=owner.id)
        self.db.add(db_vehicle)
        commit_or_conflict(self.db, DUPLICATE_VIN)
        self.db.refresh(db_vehicle)

        logger.info(f"Added vehicle {db_vehicle.id} ({db_vehicle.make} {db_vehicle.model}) for {owner.email}")
        return db_vehicle

    def update_vehicle(self, vehicle_id: int, vehicle_update: VehicleUpdate, owner: UserModel) -> Vehicle:
        db_vehicle = self.get_owned_vehicle(vehicle_id, owner, "update")

        update_data = vehicle_update.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        new_vin = update_data.get("vin")
        if new_vin and new_vin != db_vehicle.vin and self.vin_taken(new_vin, exclude_id=vehicle_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_VIN)

        for field, value in update_data.items():
            setattr(db_vehicle, field, value)

        commit_or_conflict(self.db, DUPLICATE_VIN)
        self.db.refresh(db_vehicle)
        logger.info(f"Updated vehicle {vehicle_id}")
        return db_vehicle

    def delete_vehicle(self, vehicle_id: int, owner: UserModel) -> dict:
        db_vehicle = self.get_owned_vehicle(vehicle_id, owner, "delete")

        if db_vehicle.service_requests:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete vehicle with associated service requests"
            )

        self.db.delete(db_vehicle)
        self.db.commit()
        logger.info(f"Deleted vehicle {vehicle_id}")
        return {"message": "Vehicle deleted successfully"}


# Dependency injection
def get_vehicle_service(db: Session = Depends(get_db)) -> VehicleService:
    return VehicleService(db)
