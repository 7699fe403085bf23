from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import category as crud_category
from meamar.crud import organization as crud_organization
from meamar.crud import product as crud_product
from meamar.schemas.base import Page
from meamar.schemas.product import Product, ProductCreate, ProductUpdate

router = APIRouter()

# Standard error messages
PRODUCT_NOT_FOUND = "Product not found"
CATEGORY_NOT_FOUND = "Category not found"
UNAUTHORIZED = "Not enough permissions"

def _owns_organization(db: Session, organization_id: Optional[str], user_id: str) -> bool:
    organization = crud_organization.get_organization(db, organization_id) if organization_id else None
    return organization is not None and organization.user_id == user_id

def _check_category(db: Session, category_id: Optional[str]) -> None:
    if category_id and not crud_category.get_category(db, category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CATEGORY_NOT_FOUND)

@router.get("", response_model=Page[Product])
def list_products(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    search: Optional[str] = None,
    is_active: bool = Query(True, alias="isActive"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    """
    Get products with filtering; inactive products only with isActive=false
    """
    items, total = crud_product.list_products(
        db,
        organization_id=organization_id,
        category_id=category_id,
        search=search,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Create a product under an organization the caller owns
    """
    if not _owns_organization(db, product_in.organization_id, auth.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
    _check_category(db, product_in.category_id)
    return crud_product.create_product(db, product_in.model_dump())

@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, db: Session = Depends(deps.get_db)):
    product = crud_product.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return product

@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    product_in: ProductUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    product = crud_product.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    if not _owns_organization(db, product.organization_id, auth.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
    updates = product_in.model_dump(exclude_unset=True)
    _check_category(db, updates.get("category_id"))
    return crud_product.update_product(db, product, updates)
