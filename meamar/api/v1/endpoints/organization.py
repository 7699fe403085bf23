import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import organization as crud_organization
from meamar.models.organization import OrganizationStatus
from meamar.schemas.base import Page
from meamar.schemas.organization import Organization, OrganizationCreate, OrganizationUpdate
from meamar.services import transitions

logger = logging.getLogger(__name__)

router = APIRouter()

# Standard error messages
ORGANIZATION_NOT_FOUND = "Organization not found"
NOT_OWNER = "Not enough permissions"
STATUS_ADMIN_ONLY = "Only admins can change organization status"
INVALID_STATUS = "Invalid status"

def _parse_status(value: Optional[str]) -> Optional[OrganizationStatus]:
    if not value or value == "all":
        return None
    try:
        return OrganizationStatus(value)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_STATUS)

@router.get("", response_model=Page[Organization])
def list_organizations(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
):
    """
    Browse vendor organizations (public). status=all disables the status filter.
    """
    items, total = crud_organization.list_organizations(
        db,
        status=_parse_status(status_filter),
        search=search,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Organization, status_code=status.HTTP_201_CREATED)
def create_organization(
    organization_in: OrganizationCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Submit a vendor profile; it starts pending until an admin reviews it
    """
    organization = crud_organization.create_organization(db, organization_in.model_dump(), auth.user_id)
    logger.info(
        "Organization submitted",
        extra={"event": "organization.created", "organization_id": organization.id, "user_id": auth.user_id},
    )
    return organization

@router.get("/{organization_id}", response_model=Organization)
def get_organization(organization_id: str, db: Session = Depends(deps.get_db)):
    organization = crud_organization.get_organization(db, organization_id)
    if not organization:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORGANIZATION_NOT_FOUND)
    return organization

@router.put("/{organization_id}", response_model=Organization)
def update_organization(
    organization_id: str,
    organization_in: OrganizationUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Partial update by the owner or an admin. Only admins may move the status,
    and only along the approval workflow.
    """
    organization = crud_organization.get_organization(db, organization_id)
    if not organization:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORGANIZATION_NOT_FOUND)
    if organization.user_id != auth.user_id and not auth.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_OWNER)

    updates = organization_in.model_dump(exclude_unset=True)
    new_status = updates.get("status")
    if "status" in updates:
        if not auth.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=STATUS_ADMIN_ONLY)
        if new_status is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_STATUS)
        try:
            transitions.ORGANIZATION.check(organization.status, new_status)
        except transitions.InvalidTransition as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    previous_status = organization.status
    organization = crud_organization.update_organization(db, organization, updates)

    if new_status is not None and new_status != previous_status:
        logger.info(
            "Organization status changed",
            extra={
                "event": "organization.status_changed",
                "organization_id": organization.id,
                "from": previous_status.value,
                "to": new_status.value,
                "admin_id": auth.user_id,
            },
        )
    return organization
