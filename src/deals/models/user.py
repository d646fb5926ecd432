"""App user data models."""

from typing import List, Optional

from pydantic import Field

from .base import CatalogModel, Entity, Payload, UpdatePayload, UtcDatetime
from .enums import UserStatus


class UserLocation(CatalogModel):
    city: str = ""
    country: str = ""


class AppUser(Entity):
    """App user model.

    Liked flyer and store ids are plain references; they are not checked
    against the catalog.
    """

    email: str
    first_name: str = ""
    last_name: str = ""
    profile_image: str = ""
    location: UserLocation = Field(default_factory=UserLocation)
    language: str = "en"
    status: UserStatus = UserStatus.ACTIVE
    liked_flyers: List[str] = Field(default_factory=list)
    liked_stores: List[str] = Field(default_factory=list)
    last_login_at: Optional[UtcDatetime] = None
    last_active_at: Optional[UtcDatetime] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AppUserView(AppUser):
    name: str
    total_liked_flyers: int = 0
    total_liked_stores: int = 0


class AppUserCreate(Payload):
    email: str = Field(min_length=3, pattern=r'^[^@\s]+@[^@\s]+$')
    first_name: str = ""
    last_name: str = ""
    profile_image: str = ""
    location: UserLocation = Field(default_factory=UserLocation)
    language: str = "en"
    status: UserStatus = UserStatus.PENDING_VERIFICATION
    liked_flyers: List[str] = Field(default_factory=list)
    liked_stores: List[str] = Field(default_factory=list)


class AppUserUpdate(UpdatePayload):
    """Admin-side user changes."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image: Optional[str] = None
    location: Optional[UserLocation] = None
    language: Optional[str] = None
    status: Optional[UserStatus] = None
    liked_flyers: Optional[List[str]] = None
    liked_stores: Optional[List[str]] = None
