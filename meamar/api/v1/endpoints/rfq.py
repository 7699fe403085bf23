import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import category as crud_category
from meamar.crud import organization as crud_organization
from meamar.crud import rfq as crud_rfq
from meamar.models.rfq import RfqStatus
from meamar.schemas.base import Page
from meamar.schemas.rfq import (
    Rfq,
    RfqCreate,
    RfqResponse,
    RfqResponseCreate,
    RfqResponseDecision,
    RfqUpdate,
)
from meamar.services import transitions

logger = logging.getLogger(__name__)

router = APIRouter()

# Standard error messages
RFQ_NOT_FOUND = "RFQ not found"
CATEGORY_NOT_FOUND = "Category not found"
RESPONSE_NOT_FOUND = "Quote not found"
UNAUTHORIZED = "Not enough permissions"
RFQ_NOT_DRAFT = "Only draft RFQs can be edited"
RFQ_NOT_PUBLISHED = "Quotes can only be submitted for published RFQs"
RFQ_NOT_OPEN = "Quotes can only be decided while the RFQ is published"
VENDOR_REQUIRED = "A vendor organization is required to submit quotes"
ALREADY_ACCEPTED = "Another quote has already been accepted for this RFQ"

def _get_rfq_or_404(db: Session, rfq_id: str):
    rfq = crud_rfq.get_rfq(db, rfq_id)
    if not rfq:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RFQ_NOT_FOUND)
    return rfq

def _check_category(db: Session, category_id: Optional[str]) -> None:
    if category_id and not crud_category.get_category(db, category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CATEGORY_NOT_FOUND)

@router.get("", response_model=Page[Rfq])
def list_rfqs(
    user_id: Optional[str] = Query(None, alias="userId"),
    status_filter: Optional[RfqStatus] = Query(None, alias="status"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    items, total = crud_rfq.list_rfqs(
        db,
        user_id=user_id,
        status=status_filter,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Rfq, status_code=status.HTTP_201_CREATED)
def create_rfq(
    rfq_in: RfqCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    _check_category(db, rfq_in.category_id)
    return crud_rfq.create_rfq(db, rfq_in.model_dump(), auth.user_id)

@router.get("/{rfq_id}", response_model=Rfq)
def get_rfq(rfq_id: str, db: Session = Depends(deps.get_db)):
    return _get_rfq_or_404(db, rfq_id)

@router.patch("/{rfq_id}", response_model=Rfq)
def update_rfq(
    rfq_id: str,
    rfq_in: RfqUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    The buyer edits a draft and moves it through publish/close/cancel.
    Admins may only close.
    """
    rfq = _get_rfq_or_404(db, rfq_id)
    updates = rfq_in.model_dump(exclude_unset=True)
    new_status = updates.pop("status", None)

    is_owner = rfq.user_id == auth.user_id
    admin_closing = auth.is_admin and new_status == RfqStatus.CLOSED and not updates
    if not is_owner and not admin_closing:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)

    if updates and rfq.status != RfqStatus.DRAFT:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=RFQ_NOT_DRAFT)

    _check_category(db, updates.get("category_id"))

    budget_min = updates.get("budget_min", rfq.budget_min)
    budget_max = updates.get("budget_max", rfq.budget_max)
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="budgetMin must not exceed budgetMax")

    previous_status = rfq.status
    if new_status is not None:
        try:
            transitions.RFQ.check(rfq.status, new_status)
        except transitions.InvalidTransition as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        updates["status"] = new_status

    rfq = crud_rfq.update_rfq(db, rfq, updates)

    if new_status is not None and new_status != previous_status:
        logger.info(
            "RFQ status changed",
            extra={"event": "rfq.status_changed", "rfq_id": rfq.id, "from": previous_status.value, "to": new_status.value},
        )
    return rfq

@router.get("/{rfq_id}/responses", response_model=Page[RfqResponse])
def list_rfq_responses(
    rfq_id: str,
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    """
    Quotes for an RFQ, cheapest first
    """
    _get_rfq_or_404(db, rfq_id)
    items, total = crud_rfq.list_rfq_responses(db, rfq_id, limit=limit, offset=offset)
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("/{rfq_id}/responses", response_model=RfqResponse, status_code=status.HTTP_201_CREATED)
def create_rfq_response(
    rfq_id: str,
    response_in: RfqResponseCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Submit a quote on behalf of the caller's vendor organization
    """
    rfq = _get_rfq_or_404(db, rfq_id)
    organization = crud_organization.get_user_organization(db, auth.user_id)
    if not organization:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=VENDOR_REQUIRED)
    if rfq.status != RfqStatus.PUBLISHED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=RFQ_NOT_PUBLISHED)

    response = crud_rfq.create_rfq_response(db, response_in.model_dump(), rfq.id, organization.id)
    logger.info(
        "Quote submitted",
        extra={"event": "quote.created", "rfq_id": rfq.id, "response_id": response.id, "organization_id": organization.id},
    )
    return response

@router.put("/{rfq_id}/responses/{response_id}", response_model=RfqResponse)
def decide_rfq_response(
    rfq_id: str,
    response_id: str,
    decision: RfqResponseDecision,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    The RFQ owner accepts or rejects a quote. At most one quote per RFQ is accepted.
    """
    rfq = _get_rfq_or_404(db, rfq_id)
    if rfq.user_id != auth.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)

    response = crud_rfq.get_rfq_response(db, response_id)
    if not response or response.rfq_id != rfq.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RESPONSE_NOT_FOUND)
    # closed and cancelled RFQs keep whatever was decided before
    if rfq.status != RfqStatus.PUBLISHED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=RFQ_NOT_OPEN)

    try:
        transitions.QUOTE_DECISION.check(response.is_accepted, decision.is_accepted)
    except transitions.InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if decision.is_accepted and response.is_accepted is None:
        accepted = crud_rfq.get_accepted_response(db, rfq.id)
        if accepted is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_ACCEPTED)

    response = crud_rfq.update_rfq_response(db, response, {"is_accepted": decision.is_accepted})
    logger.info(
        "Quote decided",
        extra={
            "event": "quote.accepted" if decision.is_accepted else "quote.rejected",
            "rfq_id": rfq.id,
            "response_id": response.id,
        },
    )
    return response
