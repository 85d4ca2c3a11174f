from fastapi import APIRouter, Depends, status, Query
from typing import Optional

from apps.quotes.schemas import QuoteCreate, QuoteUpdate, QuoteResponse, QuoteListResponse
from apps.quotes.services import QuoteService, get_quote_service
from apps.auth.permissions import authorize
from apps.auth.services import get_current_user, get_current_client, get_current_mechanic
from apps.auth.models import UserModel
from core.lifecycle import QuoteStatus

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{quote_id}) ============

@router.get("/", response_model=QuoteListResponse, summary="List quotes")
def list_quotes(
    request_id: Optional[int] = Query(None, description="Only quotes for this service request"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: QuoteService = Depends(get_quote_service),
    current_user: UserModel = Depends(get_current_user)
):
    """Clients see quotes on their requests, mechanics see their own quotes"""
    quotes, total = service.get_quotes(current_user, request_id=request_id, skip=skip, limit=limit)
    return QuoteListResponse(items=quotes, total=total)

@router.get("/my-quotes", response_model=QuoteListResponse, summary="Get mechanic's quotes")
def list_my_quotes(
    service: QuoteService = Depends(get_quote_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    quotes, total = service.get_quotes(mechanic)
    return QuoteListResponse(items=quotes, total=total)

@router.get("/request/{request_id}", response_model=QuoteListResponse, summary="Quotes for a request")
def list_request_quotes(
    request_id: int,
    service: QuoteService = Depends(get_quote_service),
    current_user: UserModel = Depends(get_current_user)
):
    quotes, total = service.get_quotes_for_request(request_id, current_user)
    return QuoteListResponse(items=quotes, total=total)

@router.post("/", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
def create_quote(
    data: QuoteCreate,
    service: QuoteService = Depends(get_quote_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    """Quote an open request; one quote per mechanic per request"""
    return service.quote_to_response(service.create_quote(data, mechanic))

# ============ DYNAMIC ROUTES ============

@router.get("/{quote_id}", response_model=QuoteResponse)
def get_quote(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
    current_user: UserModel = Depends(get_current_user)
):
    quote = service.get_quote_or_404(quote_id)
    authorize(current_user, quote, "view")
    return service.quote_to_response(quote)

@router.put("/{quote_id}", response_model=QuoteResponse)
def update_quote(
    quote_id: int,
    update: QuoteUpdate,
    service: QuoteService = Depends(get_quote_service),
    current_user: UserModel = Depends(get_current_user)
):
    return service.quote_to_response(service.update_quote(quote_id, update, current_user))

@router.put("/{quote_id}/accept", response_model=QuoteResponse)
def accept_quote(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
    client: UserModel = Depends(get_current_client)
):
    return service.quote_to_response(service.respond(quote_id, QuoteStatus.ACCEPTED, client))

@router.put("/{quote_id}/reject", response_model=QuoteResponse)
def reject_quote(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
    client: UserModel = Depends(get_current_client)
):
    return service.quote_to_response(service.respond(quote_id, QuoteStatus.REJECTED, client))

@router.delete("/{quote_id}")
def delete_quote(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
    mechanic: UserModel = Depends(get_current_mechanic)
):
    """Withdraw a pending, unbooked quote"""
    return service.delete_quote(quote_id, mechanic)
