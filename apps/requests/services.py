from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status, Depends
import logging

from apps.requests.models import ServiceRequest
from apps.requests.schemas import ServiceRequestCreate, ServiceRequestUpdate
from apps.vehicles.models import Vehicle
from apps.auth.models import UserModel
from apps.auth.permissions import authorize, is_client, is_mechanic, mechanic_id_of
from core.database import get_db
from core.lifecycle import RequestStatus, transition

logger = logging.getLogger(__name__)


class ServiceRequestService:
    def __init__(self, db: Session):
        self.db = db

    def get_request(self, request_id: int) -> Optional[ServiceRequest]:
        return self.db.query(ServiceRequest).filter(ServiceRequest.id == request_id).first()

    def get_request_or_404(self, request_id: int) -> ServiceRequest:
        request = self.get_request(request_id)
        if not request:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Service request not found"
            )
        return request

    def get_requests(
        self,
        user: UserModel,
        status_filter: Optional[RequestStatus] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[Dict], int]:
        """Clients see their own requests, mechanics see everything still open"""
        query = self.db.query(ServiceRequest)

        if is_client(user):
            query = query.filter(ServiceRequest.user_id == user.id)
            if status_filter:
                query = query.filter(ServiceRequest.status == status_filter)
        else:
            query = query.filter(ServiceRequest.status == RequestStatus.OPEN)

        query = query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
        total = query.count()
        requests = [self.request_to_response(r, user) for r in query.offset(skip).limit(limit).all()]
        return requests, total

    def create_request(self, data: ServiceRequestCreate, client: UserModel) -> ServiceRequest:
        vehicle = self.db.query(Vehicle).filter(
            Vehicle.id == data.vehicle_id,
            Vehicle.user_id == client.id
        ).first()
        if not vehicle:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")

        db_request = ServiceRequest(
            **data.model_dump(),
            user_id=client.id,
            status=RequestStatus.OPEN
        )
        self.db.add(db_request)
        self.db.commit()
        self.db.refresh(db_request)

        logger.info(f"Created service request {db_request.id} for vehicle {vehicle.id} by {client.email}")
        return db_request

    def update_request(self, request_id: int, update: ServiceRequestUpdate, user: UserModel) -> ServiceRequest:
        """Owners edit the description fields; mechanics may only cancel"""
        db_request = self.get_request_or_404(request_id)

        update_data = update.model_dump(exclude_unset=True, exclude_none=True)
        new_status = update_data.pop("status", None)

        if is_mechanic(user):
            if update_data:
                authorize(user, db_request, "update")
            if new_status is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")
            return self.change_status(request_id, new_status, user)

        authorize(user, db_request, "update")
        if new_status is not None and new_status != db_request.status:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Clients cannot change request status"
            )
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        for field, value in update_data.items():
            setattr(db_request, field, value)

        self.db.commit()
        self.db.refresh(db_request)
        logger.info(f"Updated service request {request_id}")
        return db_request

    def change_status(self, request_id: int, new_status: RequestStatus, user: UserModel) -> ServiceRequest:
        """Direct status edit by a mechanic who quoted the request.

        The other request states follow the request's booking and are
        never set by hand.
        """
        db_request = self.get_request_or_404(request_id)

        if is_client(user):
            authorize(user, db_request, "update")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Clients cannot change request status"
            )

        authorize(user, db_request, "cancel")
        if new_status != RequestStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request status can only be set to 'cancelled' directly; other states follow its booking"
            )
        transition(db_request, RequestStatus.CANCELLED, "request")

        self.db.commit()
        self.db.refresh(db_request)
        logger.info(f"Service request {request_id} cancelled by mechanic {user.email}")
        return db_request

    def delete_request(self, request_id: int, client: UserModel) -> dict:
        db_request = self.get_request_or_404(request_id)
        authorize(client, db_request, "delete")

        if db_request.quotes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete service request with existing quotes"
            )

        self.db.delete(db_request)
        self.db.commit()
        logger.info(f"Deleted service request {request_id}")
        return {"message": "Service request deleted successfully"}

    def request_to_response(self, request: ServiceRequest, user: UserModel) -> Dict:
        """Convert ServiceRequest model to response dictionary"""
        data = {
            "id": request.id,
            "user_id": request.user_id,
            "vehicle_id": request.vehicle_id,
            "service_type": request.service_type,
            "description": request.description,
            "location": request.location,
            "urgency": request.urgency,
            "preferred_date": request.preferred_date,
            "photo": request.photo,
            "status": request.status,
            "make": request.vehicle.make,
            "model": request.vehicle.model,
            "year": request.vehicle.year,
            "license_plate": request.vehicle.license_plate,
            "quote_count": len(request.quotes),
            "created_at": request.created_at,
            "updated_at": request.updated_at,
        }
        if is_mechanic(user):
            mechanic_id = mechanic_id_of(user)
            data["has_quoted"] = any(q.mechanic_id == mechanic_id for q in request.quotes)
            data["client_name"] = request.owner.name
            data["client_phone"] = request.owner.phone
        return data


# Dependency injection
def get_request_service(db: Session = Depends(get_db)) -> ServiceRequestService:
    return ServiceRequestService(db)
