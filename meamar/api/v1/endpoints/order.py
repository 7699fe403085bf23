import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import order as crud_order
from meamar.crud import organization as crud_organization
from meamar.crud import product as crud_product
from meamar.crud import rfq as crud_rfq
from meamar.models.order import Order as OrderModel, OrderStatus
from meamar.models.rfq import RfqStatus
from meamar.schemas.base import Page
from meamar.schemas.order import Order, OrderCreate, OrderDetail, OrderStatusUpdate
from meamar.services import transitions

logger = logging.getLogger(__name__)

router = APIRouter()

# Standard error messages
ORDER_NOT_FOUND = "Order not found"
ORGANIZATION_NOT_FOUND = "Organization not found"
PRODUCT_NOT_FOUND = "Product not found"
RESPONSE_NOT_FOUND = "Quote not found"
UNAUTHORIZED = "Not enough permissions"
QUOTE_NOT_ACCEPTED = "Orders can only be placed from an accepted quote"
RFQ_CANCELLED = "The RFQ for this quote was cancelled"
BUYER_CAN_ONLY_CANCEL = "Buyers can only cancel their orders"

def _is_vendor(db: Session, order: OrderModel, user_id: str) -> bool:
    organization = crud_organization.get_organization(db, order.organization_id) if order.organization_id else None
    return organization is not None and organization.user_id == user_id

@router.get("", response_model=Page[Order])
def list_orders(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Orders received by an organization the caller owns, or else the caller's own purchases
    """
    if organization_id:
        organization = crud_organization.get_organization(db, organization_id)
        if not organization:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORGANIZATION_NOT_FOUND)
        if organization.user_id != auth.user_id and not auth.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
        items, total = crud_order.list_orders(
            db, organization_id=organization_id, status=status_filter, limit=limit, offset=offset
        )
    else:
        items, total = crud_order.list_orders(
            db, user_id=auth.user_id, status=status_filter, limit=limit, offset=offset
        )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Place an order directly from products or from an accepted quote.
    Item prices are snapshotted from the current product price.
    """
    data = order_in.model_dump(exclude={"items"})

    if order_in.rfq_response_id:
        response = crud_rfq.get_rfq_response(db, order_in.rfq_response_id)
        if not response:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RESPONSE_NOT_FOUND)
        if response.is_accepted is not True:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=QUOTE_NOT_ACCEPTED)
        rfq = crud_rfq.get_rfq(db, response.rfq_id)
        if rfq is None or rfq.user_id != auth.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
        if rfq.status == RfqStatus.CANCELLED:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=RFQ_CANCELLED)
        data["organization_id"] = response.organization_id
        if data.get("total_amount") is None:
            data["total_amount"] = response.price
            data["currency"] = response.currency

    if not crud_organization.get_organization(db, data["organization_id"]):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORGANIZATION_NOT_FOUND)

    items = []
    for item in order_in.items:
        product = crud_product.get_product(db, item.product_id)
        if not product or product.organization_id != data["organization_id"]:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
        if product.price is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{product.name} has no list price; request a quote instead",
            )
        minimum = product.min_order_quantity or 1
        if item.quantity < minimum:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Minimum order quantity for {product.name} is {minimum}",
            )
        items.append(
            {
                "product_id": product.id,
                "quantity": item.quantity,
                "unit_price": product.price,
                "specifications": item.specifications or product.specifications,
            }
        )

    order = crud_order.create_order(db, data, items, auth.user_id)
    logger.info(
        "Order placed",
        extra={"event": "order.created", "order_id": order.id, "order_number": order.order_number},
    )
    return order

@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: str,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    order = crud_order.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORDER_NOT_FOUND)
    if order.user_id != auth.user_id and not auth.is_admin and not _is_vendor(db, order, auth.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
    return order

@router.patch("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    status_in: OrderStatusUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    The vendor (or an admin) moves the order forward; the buyer may only cancel
    """
    order = crud_order.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORDER_NOT_FOUND)

    if not auth.is_admin and not _is_vendor(db, order, auth.user_id):
        if order.user_id != auth.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
        if status_in.status != OrderStatus.CANCELLED:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=BUYER_CAN_ONLY_CANCEL)

    try:
        transitions.ORDER.check(order.status, status_in.status)
    except transitions.InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    previous_status = order.status
    order = crud_order.update_order(db, order, {"status": status_in.status})
    if order.status != previous_status:
        logger.info(
            "Order status changed",
            extra={
                "event": "order.status_changed",
                "order_id": order.id,
                "from": previous_status.value,
                "to": order.status.value,
                "user_id": auth.user_id,
            },
        )
    return order
