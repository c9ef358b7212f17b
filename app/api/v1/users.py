from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.schemas.common import GeoPoint
from app.schemas.user import LocationUpdate, PasswordChange, UserOut, UserUpdate
from app.services.auth_service import get_current_user
from app.services.user_service import change_password, to_user_out, update_user, update_user_location

router = APIRouter(prefix='/users', tags=['users'])


@router.get('/profile', response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.put('/profile', response_model=UserOut)
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    try:
        record = update_user(session, user, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_out(record)


@router.put('/location', response_model=GeoPoint)
def update_location(
    payload: LocationUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> GeoPoint:
    point = payload.to_point()
    update_user_location(session, user, point)
    return point


@router.put('/change-password')
def change_password_endpoint(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    if not change_password(session, user, payload.current_password, payload.new_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Current password is incorrect')
    return {'status': 'ok'}
