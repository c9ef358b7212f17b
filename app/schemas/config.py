from pydantic import BaseModel


class CatalogOut(BaseModel):
    items: list[str]
    count: int


class AppConfigOut(BaseModel):
    categories: list[str]
    statuses: list[str]
    flag_reasons: list[str]
    roles: list[str]
