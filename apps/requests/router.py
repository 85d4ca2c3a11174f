from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional

from apps.requests.schemas import (
    ServiceRequestCreate, ServiceRequestUpdate, ServiceRequestStatusUpdate,
    ServiceRequestResponse, ServiceRequestListResponse
)
from apps.requests.services import ServiceRequestService, get_request_service
from apps.auth.permissions import authorize
from apps.auth.services import get_current_user, get_current_client
from apps.auth.models import UserModel
from core.lifecycle import RequestStatus

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{request_id}) ============

@router.get(
    "/",
    response_model=ServiceRequestListResponse,
    summary="List service requests",
    description="Clients get their own requests, mechanics get all open requests."
)
def list_requests(
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Number of items to return"),
    status_filter: Optional[RequestStatus] = Query(None, alias="status", description="Filter by status (clients)"),
    service: ServiceRequestService = Depends(get_request_service),
    current_user: UserModel = Depends(get_current_user)
):
    requests, total = service.get_requests(current_user, status_filter=status_filter, skip=skip, limit=limit)
    return ServiceRequestListResponse(items=requests, total=total)

@router.get("/my-requests", response_model=ServiceRequestListResponse, summary="Get client's requests")
def list_my_requests(
    service: ServiceRequestService = Depends(get_request_service),
    client: UserModel = Depends(get_current_client)
):
    requests, total = service.get_requests(client)
    return ServiceRequestListResponse(items=requests, total=total)

@router.post("/", response_model=ServiceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    data: ServiceRequestCreate,
    service: ServiceRequestService = Depends(get_request_service),
    client: UserModel = Depends(get_current_client)
):
    """Open a new service request for one of the caller's vehicles"""
    db_request = service.create_request(data, client)
    return service.request_to_response(db_request, client)

# ============ DYNAMIC ROUTES ============

@router.get("/{request_id}", response_model=ServiceRequestResponse)
def get_request(
    request_id: int,
    service: ServiceRequestService = Depends(get_request_service),
    current_user: UserModel = Depends(get_current_user)
):
    db_request = service.get_request(request_id)
    if not db_request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service request not found")
    authorize(current_user, db_request, "view")
    return service.request_to_response(db_request, current_user)

@router.put("/{request_id}", response_model=ServiceRequestResponse)
def update_request(
    request_id: int,
    update: ServiceRequestUpdate,
    service: ServiceRequestService = Depends(get_request_service),
    current_user: UserModel = Depends(get_current_user)
):
    db_request = service.update_request(request_id, update, current_user)
    return service.request_to_response(db_request, current_user)

@router.put("/{request_id}/status", response_model=ServiceRequestResponse)
def update_request_status(
    request_id: int,
    status_update: ServiceRequestStatusUpdate,
    service: ServiceRequestService = Depends(get_request_service),
    current_user: UserModel = Depends(get_current_user)
):
    """Mechanics who quoted an open request may cancel it"""
    db_request = service.change_status(request_id, status_update.status, current_user)
    return service.request_to_response(db_request, current_user)

@router.delete("/{request_id}")
def delete_request(
    request_id: int,
    service: ServiceRequestService = Depends(get_request_service),
    client: UserModel = Depends(get_current_client)
):
    return service.delete_request(request_id, client)
