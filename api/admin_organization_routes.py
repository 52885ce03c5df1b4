import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Form, status
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Session, select

from api.organization_routes import OrganizationGeofenceResponse, geofence_response
from core.deps import require_admin_role, require_manager_role
from core.exceptions import AuthorizationError, ConflictError, NotFoundError
from db.session import get_session
from models.organization import Organization
from models.user import User, UserRole
from utils.view_cache import invalidate_scope, org_scope

logger = logging.getLogger(__name__)

# --- Router Definition ---
router = APIRouter()


# --- Pydantic Data Models ---


# Create model: Data needed when creating a NEW facility via POST
class OrganizationCreate(BaseModel):
    id: str = PydanticField(..., min_length=1, description="Unique facility identifier")
    name: Optional[str] = None
    latitude: Optional[float] = PydanticField(default=None, ge=-90, le=90)
    longitude: Optional[float] = PydanticField(default=None, ge=-180, le=180)
    radius_meters: Optional[float] = PydanticField(default=None, gt=0)


def _get_organization_for(user: User, organization_id: str, session: Session) -> Organization:
    # Managers only see their own facility; admins see all of them
    if user.role != UserRole.ADMIN and user.organization_id != organization_id:
        raise AuthorizationError("You can only manage your own organization.")

    organization = session.get(Organization, organization_id)
    if not organization:
        raise NotFoundError(f"Organization '{organization_id}' not found.")
    return organization


# --- API Endpoints ---


# Endpoint: Create a New Facility
@router.post("", response_model=OrganizationGeofenceResponse, status_code=status.HTTP_201_CREATED)
def create_organization(
    organization_in: OrganizationCreate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(require_admin_role)],
):
    if session.get(Organization, organization_in.id):
        raise ConflictError(f"Organization with ID '{organization_in.id}' already exists.")

    organization = Organization(**organization_in.model_dump())
    session.add(organization)
    session.commit()
    session.refresh(organization)

    logger.info("Admin %s created organization %s", admin_user.email, organization.id)
    return geofence_response(organization)


# Endpoint: List All Facilities
@router.get("", response_model=List[OrganizationGeofenceResponse])
def list_organizations(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(require_admin_role)],
):
    organizations = session.exec(select(Organization).order_by(Organization.id)).all()
    return [geofence_response(organization) for organization in organizations]


# Endpoint: Geofence Settings Visible to the Caller
@router.get("/settings", response_model=List[OrganizationGeofenceResponse])
def get_organization_settings(
    session: Annotated[Session, Depends(get_session)],
    manager: Annotated[User, Depends(require_manager_role)],
):
    if manager.role == UserRole.ADMIN:
        organizations = session.exec(select(Organization).order_by(Organization.id)).all()
    else:
        if not manager.organization_id:
            raise NotFoundError("You are not assigned to an organization.")
        organizations = [_get_organization_for(manager, manager.organization_id, session)]
    return [geofence_response(organization) for organization in organizations]


# Endpoint: Update a Facility's Geofence (form submission)
@router.post("/{organization_id}/settings", response_model=OrganizationGeofenceResponse)
def update_organization_settings(
    organization_id: str,
    latitude: Annotated[float, Form(ge=-90, le=90)],
    longitude: Annotated[float, Form(ge=-180, le=180)],
    radius_meters: Annotated[float, Form(gt=0)],
    session: Annotated[Session, Depends(get_session)],
    manager: Annotated[User, Depends(require_manager_role)],
    name: Annotated[Optional[str], Form()] = None,
):
    organization = _get_organization_for(manager, organization_id, session)

    organization.latitude = latitude
    organization.longitude = longitude
    organization.radius_meters = radius_meters
    if name:
        organization.name = name

    session.add(organization)
    session.commit()
    session.refresh(organization)

    # Manager dashboards for this facility show its geofence
    invalidate_scope(org_scope(organization.id))
    invalidate_scope(org_scope(None))

    logger.info(
        "User %s updated geofence of %s to (%s, %s) r=%sm",
        manager.email,
        organization.id,
        latitude,
        longitude,
        radius_meters,
    )
    return geofence_response(organization)
