from fastapi import APIRouter, Depends, status, Query

from apps.reviews.schemas import (
    ReviewCreate, ReviewUpdate, ReviewResponse, MechanicReviewsResponse, ReviewListResponse
)
from apps.reviews.services import ReviewService, get_review_service
from apps.auth.services import get_current_client
from apps.auth.models import UserModel

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{review_id}) ============

@router.get(
    "/mechanic/{mechanic_id}",
    response_model=MechanicReviewsResponse,
    summary="Reviews of a mechanic",
    description="Public rating summary and paginated reviews of one mechanic"
)
def get_mechanic_reviews(
    mechanic_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: str = Query("newest", pattern="^(newest|oldest)$"),
    service: ReviewService = Depends(get_review_service)
):
    return service.get_mechanic_reviews(mechanic_id, page=page, limit=limit, sort=sort)

@router.get("/my-reviews", response_model=ReviewListResponse, summary="Reviews I have written")
def get_my_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
    client: UserModel = Depends(get_current_client)
):
    return service.get_my_reviews(client, page=page, limit=limit)

@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    client: UserModel = Depends(get_current_client)
):
    """Review a completed booking; recalculates the mechanic's rating"""
    return service.review_to_response(service.create_review(data, client))

# ============ DYNAMIC ROUTES ============

@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(review_id: int, service: ReviewService = Depends(get_review_service)):
    return service.review_to_response(service.get_review_or_404(review_id))

@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    update: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
    client: UserModel = Depends(get_current_client)
):
    return service.review_to_response(service.update_review(review_id, update, client))

@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    service: ReviewService = Depends(get_review_service),
    client: UserModel = Depends(get_current_client)
):
    return service.delete_review(review_id, client)
