from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.user import User
from app.schemas.statistics import DashboardStats, LocationStats, TrendData, TrendType, UserActivityStats
from app.services.auth_service import get_current_user, require_admin
from app.services.geo import RadiusFilter
from app.services.statistics_service import dashboard_stats, location_stats, trend_data, user_activity_stats

router = APIRouter(prefix='/statistics', tags=['statistics'])


@router.get('/dashboard', response_model=DashboardStats)
def dashboard_endpoint(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> DashboardStats:
    return dashboard_stats(session)


@router.get('/trends', response_model=TrendData)
def trends_endpoint(
    period: int = Query(default=30, ge=1, le=365),
    type: TrendType = 'issues',
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> TrendData:
    return trend_data(session, period, type)


@router.get('/location', response_model=LocationStats)
def location_endpoint(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    radius: float = Query(default=settings.DEFAULT_RADIUS_METERS, gt=0),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> LocationStats:
    return location_stats(session, RadiusFilter(latitude=lat, longitude=lng, radius=radius))


@router.get('/user', response_model=UserActivityStats)
def user_activity_endpoint(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserActivityStats:
    return user_activity_stats(session, user)
