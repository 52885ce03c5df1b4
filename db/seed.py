# Insert Sample Facilities and Staff
import logging

from sqlmodel import Session, SQLModel

from models.organization import Organization
from models.user import User, UserRole

logger = logging.getLogger(__name__)

SEED_ORGANIZATIONS = [
    # Geofence radius in meters
    {"id": "org1", "name": "City General Hospital", "latitude": 12.9716, "longitude": 77.5946, "radius_meters": 200.0},
    {"id": "org2", "name": "Downtown Clinic", "latitude": 12.9352, "longitude": 77.6245, "radius_meters": 100.0},
    {"id": "org3", "name": "Metro Medical Center", "latitude": 12.9822, "longitude": 77.6033, "radius_meters": 150.0},
    {"id": "org4", "name": "Riverside Health Clinic", "latitude": 12.9237, "longitude": 77.6141, "radius_meters": 120.0},
    {"id": "org5", "name": "Sunshine Children's Hospital", "latitude": 12.9569, "longitude": 77.7011, "radius_meters": 180.0},
]

SEED_USERS = [
    # City General Hospital
    {"id": "user1", "email": "alice.johnson@citygeneral.com", "name": "Alice Johnson", "role": UserRole.WORKER, "organization_id": "org1"},
    {"id": "user2", "email": "robert.smith@citygeneral.com", "name": "Dr. Robert Smith", "role": UserRole.MANAGER, "organization_id": "org1"},
    {"id": "user3", "email": "sarah.davis@citygeneral.com", "name": "Sarah Davis", "role": UserRole.WORKER, "organization_id": "org1"},
    {"id": "user4", "email": "michael.brown@citygeneral.com", "name": "Michael Brown", "role": UserRole.WORKER, "organization_id": "org1"},
    # Downtown Clinic
    {"id": "user5", "email": "emma.wilson@downtownclinic.com", "name": "Emma Wilson", "role": UserRole.WORKER, "organization_id": "org2"},
    {"id": "user6", "email": "james.garcia@downtownclinic.com", "name": "Dr. James Garcia", "role": UserRole.MANAGER, "organization_id": "org2"},
    # Metro Medical Center
    {"id": "user7", "email": "olivia.martinez@metromedical.com", "name": "Olivia Martinez", "role": UserRole.WORKER, "organization_id": "org3"},
    {"id": "user8", "email": "william.lee@metromedical.com", "name": "Dr. William Lee", "role": UserRole.MANAGER, "organization_id": "org3"},
    # Riverside Health Clinic
    {"id": "user9", "email": "sophia.taylor@riversidehealth.com", "name": "Sophia Taylor", "role": UserRole.WORKER, "organization_id": "org4"},
    # Sunshine Children's Hospital
    {"id": "user10", "email": "noah.anderson@sunshinechildrens.com", "name": "Noah Anderson", "role": UserRole.WORKER, "organization_id": "org5"},
    # Platform administrator, not tied to one facility
    {"id": "admin1", "email": "admin@careshift.example.org", "name": "Platform Admin", "role": UserRole.ADMIN, "organization_id": None},
]


def seed(session: Session) -> dict:
    """Insert any missing seed rows. Existing rows are left untouched."""
    added = {"organizations": 0, "users": 0}

    for data in SEED_ORGANIZATIONS:
        if session.get(Organization, data["id"]) is None:
            session.add(Organization(**data))
            added["organizations"] += 1
        else:
            logger.info("Organization %s already exists", data["id"])
    # Users reference organizations
    session.flush()

    for data in SEED_USERS:
        if session.get(User, data["id"]) is None:
            session.add(User(**data))
            added["users"] += 1
        else:
            logger.info("User %s already exists", data["id"])

    session.commit()
    return added


if __name__ == "__main__":
    from db.session import engine
    import models  # noqa: F401

    logging.basicConfig(level=logging.INFO)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        result = seed(session)
    logger.info(
        "Seeded %d organizations and %d users", result["organizations"], result["users"]
    )
