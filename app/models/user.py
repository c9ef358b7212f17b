from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel
from app.models.enums import UserRole, VerificationLevel, enum_column


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    username: str = Field(index=True, unique=True, max_length=50)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    is_active: bool = True
    is_verified: bool = False
    verification_level: VerificationLevel = Field(
        default=VerificationLevel.EMAIL,
        sa_column=enum_column(VerificationLevel, 'verification_level'),
    )
    role: UserRole = Field(default=UserRole.CITIZEN, sa_column=enum_column(UserRole, 'user_role'))
    longitude: Optional[float] = None
    latitude: Optional[float] = None
