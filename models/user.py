from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


# Flat role enumeration checked at each manager-only boundary
class UserRole(str, Enum):
    WORKER = "worker"
    MANAGER = "manager"
    ADMIN = "admin"


MANAGER_ROLES = (UserRole.MANAGER, UserRole.ADMIN)


class User(SQLModel, table=True):
    # "user" is reserved in PostgreSQL
    __tablename__ = "app_user"

    id: str = Field(primary_key=True)
    # Stable subject id from the identity provider, linked on first login
    auth_uid: Optional[str] = Field(default=None, unique=True, index=True)
    email: str = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None)
    role: UserRole = Field(default=UserRole.WORKER)
    organization_id: Optional[str] = Field(
        default=None, foreign_key="organization.id", index=True
    )
    active: bool = Field(default=True)

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES
