from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from app.models.enums import UserRole, VerificationLevel
from app.schemas.common import GeoPoint, validate_lng_lat


class UserOut(BaseModel):
    id: str
    username: str
    email: EmailStr
    is_active: bool
    is_verified: bool
    verification_level: VerificationLevel
    role: UserRole
    location:Optional[GeoPoint] = None
    created_at: datetime


class UserUpdate(BaseModel):
    username:Optional[str] = Field(default=None, min_length=3, max_length=50)
    email:Optional[EmailStr] = None
    location:Optional[GeoPoint] = None
    verification_level:Optional[VerificationLevel] = None


class LocationUpdate(BaseModel):
    coordinates: list[float]

    @field_validator('coordinates')
    @classmethod
    def check_coordinates(cls, value: list[float]) -> list[float]:
        return validate_lng_lat(value)

    def to_point(self) -> GeoPoint:
        return GeoPoint(coordinates=self.coordinates)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)
