from fastapi import APIRouter
from app.models.enums import ASSIGNABLE_STATUSES, FlagReason, IssueCategory, UserRole
from app.schemas.config import AppConfigOut, CatalogOut

router = APIRouter(prefix='/config', tags=['config'])


def _catalog(values: list[str]) -> CatalogOut:
    return CatalogOut(items=values, count=len(values))


@router.get('/categories', response_model=CatalogOut)
def list_categories() -> CatalogOut:
    return _catalog([item.value for item in IssueCategory])


@router.get('/statuses', response_model=CatalogOut)
def list_statuses() -> CatalogOut:
    return _catalog([item.value for item in ASSIGNABLE_STATUSES])


@router.get('/app', response_model=AppConfigOut)
def app_config() -> AppConfigOut:
    return AppConfigOut(
        categories=[item.value for item in IssueCategory],
        statuses=[item.value for item in ASSIGNABLE_STATUSES],
        flag_reasons=[item.value for item in FlagReason],
        roles=[item.value for item in UserRole],
    )
