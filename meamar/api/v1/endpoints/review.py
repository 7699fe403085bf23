import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import order as crud_order
from meamar.crud import organization as crud_organization
from meamar.crud import product as crud_product
from meamar.crud import review as crud_review
from meamar.models.order import OrderStatus
from meamar.schemas.base import Page
from meamar.schemas.review import Review, ReviewCreate

logger = logging.getLogger(__name__)

router = APIRouter()

ORGANIZATION_NOT_FOUND = "Organization not found"
PRODUCT_NOT_FOUND = "Product not found"
ORDER_NOT_FOUND = "Order not found"

@router.get("", response_model=Page[Review])
def list_reviews(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    product_id: Optional[str] = Query(None, alias="productId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    items, total = crud_review.list_reviews(
        db,
        organization_id=organization_id,
        product_id=product_id,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
def create_review(
    review_in: ReviewCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Review an organization and/or product. The review is marked verified when
    it references a delivered order the reviewer placed.
    """
    organization = None
    if review_in.organization_id:
        organization = crud_organization.get_organization(db, review_in.organization_id)
        if not organization:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORGANIZATION_NOT_FOUND)

    product = None
    if review_in.product_id:
        product = crud_product.get_product(db, review_in.product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)

    is_verified = False
    if review_in.order_id:
        order = crud_order.get_order(db, review_in.order_id)
        if not order:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORDER_NOT_FOUND)
        is_verified = order.user_id == auth.user_id and order.status == OrderStatus.DELIVERED

    review = crud_review.create_review(
        db,
        review_in.model_dump(),
        auth.user_id,
        is_verified,
        organization=organization,
        product=product,
    )
    logger.info(
        "Review posted",
        extra={"event": "review.created", "review_id": review.id, "verified": is_verified},
    )
    return review
