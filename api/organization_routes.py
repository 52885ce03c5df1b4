from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from core.deps import get_current_user
from core.exceptions import NotFoundError
from db.session import get_session
from models.organization import Organization
from models.user import User

router = APIRouter()

# --- Pydantic Models for Response ---


class OrganizationGeofenceResponse(BaseModel):
    organization_id: str
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_meters: Optional[float] = None
    configured: bool


def geofence_response(organization: Organization) -> OrganizationGeofenceResponse:
    return OrganizationGeofenceResponse(
        organization_id=organization.id,
        name=organization.name,
        latitude=organization.latitude,
        longitude=organization.longitude,
        radius_meters=organization.radius_meters,
        configured=organization.geofence_configured,
    )


# --- API Endpoints ---


@router.get("/mine/geofence", response_model=OrganizationGeofenceResponse)
def get_my_organization_geofence(
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    """Geofence of the caller's own facility, for the clock screen."""
    if not user.organization_id:
        raise NotFoundError("You are not assigned to an organization.")
    return get_organization_geofence(user.organization_id, session, user)


@router.get("/{organization_id}/geofence", response_model=OrganizationGeofenceResponse)
def get_organization_geofence(
    organization_id: str,
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    """
    Retrieve the geofence (center and radius) of a facility so the client can
    show the distance before submitting a clock-in.
    """
    organization = session.get(Organization, organization_id)
    if not organization:
        raise NotFoundError(f"Organization '{organization_id}' not found.")
    return geofence_response(organization)
