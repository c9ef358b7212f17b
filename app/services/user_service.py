from sqlmodel import Session, select

from app.models.user import User
from app.schemas.common import GeoPoint
from app.schemas.user import UserOut, UserUpdate
from app.services.auth_service import hash_password, verify_password


def to_user_out(user: User) -> UserOut:
    location = None
    if user.longitude is not None and user.latitude is not None:
        location = GeoPoint.from_lng_lat(user.longitude, user.latitude)
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        is_active=user.is_active,
        is_verified=user.is_verified,
        verification_level=user.verification_level,
        role=user.role,
        location=location,
        created_at=user.created_at,
    )


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.get('email')
    if email is not None and email != user.email:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing and existing.id != user.id:
            raise ValueError('Email already in use')
        user.email = email

    username = data.get('username')
    if username is not None and username != user.username:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing and existing.id != user.id:
            raise ValueError('Username already in use')
        user.username = username

    if payload.location is not None:
        set_user_location(user, payload.location)
    if payload.verification_level is not None:
        user.verification_level = payload.verification_level

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def set_user_location(user: User, point: GeoPoint) -> None:
    user.longitude = point.longitude
    user.latitude = point.latitude


def update_user_location(session: Session, user: User, point: GeoPoint) -> User:
    set_user_location(user, point)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def change_password(session: Session, user: User, current_password: str, new_password: str) -> bool:
    if not verify_password(current_password, user.hashed_password):
        return False
    user.hashed_password = hash_password(new_password)
    session.add(user)
    session.commit()
    return True
