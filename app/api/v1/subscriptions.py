"""
Subscription API endpoints
"""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, ListSubscriptionsUseCase,
    UpdateSubscriptionUseCase, DeleteSubscriptionUseCase, TotalSumUseCase,
)
from app.domain.month_year import MonthYear, validate_month_year
from app.domain.subscription import Subscription, validate_sub_request
from app.infrastructure.repositories.errors import NotFoundError, StorageError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])

ERR_INTERNAL = "internal error occurred"
ERR_INVALID_ID = "invalid subscription ID"
ERR_INVALID_USER_ID = "invalid user ID"
ERR_NOT_FOUND = "subscription not found"
ERR_PERIOD_REQUIRED = "start_date and end_date must be in query"
ERR_PERIOD_INVALID = "dates must be valid"


# === Request/Response models ===

class SubscriptionRequest(BaseModel):
    # Defaults let validate_sub_request report every missing field at once
    service_name: str = ""
    price: int = 0
    user_id: uuid.UUID | None = None
    start_date: str = ""
    end_date: str | None = None  # MM-YYYY, omitted = open-ended


class SubscriptionResponse(BaseModel):
    id: uuid.UUID
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: str
    end_date: str | None = None


class TotalSumResponse(BaseModel):
    total_sum: int


# === Helper functions ===

def _parse_sub_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        logger.info("Invalid subscription ID: %r", raw)
        raise HTTPException(status_code=400, detail=ERR_INVALID_ID)


def _to_domain(req: SubscriptionRequest) -> Subscription:
    """Validate request fields; 400 with every violation on failure."""
    errors = validate_sub_request(
        req.service_name, req.price, req.user_id, req.start_date, req.end_date,
    )
    if errors:
        logger.info("Subscription validation failed: %s", errors)
        raise HTTPException(status_code=400, detail=errors)

    return Subscription.from_raw(
        service_name=req.service_name,
        price=req.price,
        user_id=req.user_id,
        start_date=req.start_date,
        end_date=req.end_date,
    )


def _to_response(sub: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=sub.id,
        service_name=sub.service_name,
        price=sub.price,
        user_id=sub.user_id,
        start_date=str(sub.start_date),
        end_date=str(sub.end_date) if sub.end_date else None,
    )


# === Endpoints ===

@router.post(
    "",
    response_model=SubscriptionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_subscription(req: SubscriptionRequest, db: Session = Depends(get_db)):
    """Create a subscription; end_date is optional"""
    sub = _to_domain(req)
    try:
        created = CreateSubscriptionUseCase(db).execute(sub)
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return _to_response(created)


@router.get("", response_model=list[SubscriptionResponse], response_model_exclude_none=True)
def list_subscriptions(db: Session = Depends(get_db)):
    """List all subscriptions"""
    try:
        subs = ListSubscriptionsUseCase(db).execute()
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return [_to_response(s) for s in subs]


@router.get("/total", response_model=TotalSumResponse)
def total_sum(
    start_date: str | None = None,
    end_date: str | None = None,
    user_id: str | None = None,
    service_name: str | None = None,
    db: Session = Depends(get_db),
):
    """
    Total cost of subscriptions active during [start_date, end_date]

    Optional filters: user_id, service_name
    """
    user_uuid = None
    if user_id:
        try:
            user_uuid = uuid.UUID(user_id)
        except ValueError:
            logger.info("Invalid user ID: %r", user_id)
            raise HTTPException(status_code=400, detail=ERR_INVALID_USER_ID)

    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail=ERR_PERIOD_REQUIRED)

    if not validate_month_year(start_date) or not validate_month_year(end_date):
        logger.info("Invalid period: %r..%r", start_date, end_date)
        raise HTTPException(status_code=400, detail=ERR_PERIOD_INVALID)

    try:
        total = TotalSumUseCase(db).execute(
            MonthYear.parse(start_date),
            MonthYear.parse(end_date),
            user_id=user_uuid,
            service_name=service_name,
        )
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return TotalSumResponse(total_sum=total)


@router.get("/{sub_id}", response_model=SubscriptionResponse, response_model_exclude_none=True)
def get_subscription(sub_id: str, db: Session = Depends(get_db)):
    """Get subscription by ID"""
    parsed_id = _parse_sub_id(sub_id)
    try:
        sub = GetSubscriptionUseCase(db).execute(parsed_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=ERR_NOT_FOUND)
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return _to_response(sub)


@router.put("/{sub_id}", response_model=SubscriptionResponse, response_model_exclude_none=True)
def update_subscription(
    sub_id: str,
    req: SubscriptionRequest,
    db: Session = Depends(get_db),
):
    """Replace every field of a subscription and return the stored record"""
    parsed_id = _parse_sub_id(sub_id)
    sub = _to_domain(req)
    try:
        updated = UpdateSubscriptionUseCase(db).execute(parsed_id, sub)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=ERR_NOT_FOUND)
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return _to_response(updated)


@router.delete("/{sub_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(sub_id: str, db: Session = Depends(get_db)):
    """Delete subscription by ID"""
    parsed_id = _parse_sub_id(sub_id)
    try:
        DeleteSubscriptionUseCase(db).execute(parsed_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=ERR_NOT_FOUND)
    except StorageError:
        raise HTTPException(status_code=500, detail=ERR_INTERNAL)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
