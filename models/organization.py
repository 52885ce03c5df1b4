from typing import Optional

from sqlmodel import Field, SQLModel

# Care facility w/ Circular Geofence


class Organization(SQLModel, table=True):
    __tablename__ = "organization"

    id: str = Field(primary_key=True, description="Unique facility identifier")
    name: Optional[str] = Field(default=None, description="Human-friendly facility name")
    # Geofence is optional until a manager configures it
    latitude: Optional[float] = Field(default=None, description="Latitude of facility center")
    longitude: Optional[float] = Field(default=None, description="Longitude of facility center")
    radius_meters: Optional[float] = Field(
        default=None, description="Allowed clock-in radius in meters"
    )

    @property
    def geofence_configured(self) -> bool:
        return (
            self.latitude is not None
            and self.longitude is not None
            and self.radius_meters is not None
        )
