from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import category as crud_category
from meamar.schemas.base import Page
from meamar.schemas.category import Category, CategoryCreate

router = APIRouter()

PARENT_NOT_FOUND = "Parent category not found"

@router.get("", response_model=Page[Category])
def list_categories(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    """
    Active categories; top level unless parentId is given
    """
    items, total = crud_category.list_categories(db, parent_id=parent_id, limit=limit, offset=offset)
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: CategoryCreate,
    auth: deps.AuthContext = Depends(deps.require_admin),
    db: Session = Depends(deps.get_db),
):
    if category_in.parent_id and not crud_category.get_category(db, category_in.parent_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PARENT_NOT_FOUND)
    return crud_category.create_category(db, category_in.model_dump())
