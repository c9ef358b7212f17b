from math import ceil
from typing import Literal
from pydantic import BaseModel, Field, field_validator


def validate_lng_lat(value: list[float]) -> list[float]:
    if len(value) != 2:
        raise ValueError('coordinates must be [longitude, latitude]')
    lng, lat = value
    if not -180 <= lng <= 180:
        raise ValueError('longitude must be between -180 and 180')
    if not -90 <= lat <= 90:
        raise ValueError('latitude must be between -90 and 90')
    return value


class GeoPoint(BaseModel):
    type: Literal['Point'] = 'Point'
    coordinates: list[float] = Field(description='[longitude, latitude]')

    @field_validator('coordinates')
    @classmethod
    def check_coordinates(cls, value: list[float]) -> list[float]:
        return validate_lng_lat(value)

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    @classmethod
    def from_lng_lat(cls, longitude: float, latitude: float) -> 'GeoPoint':
        return cls(coordinates=[longitude, latitude])


def page_meta(page: int, limit: int, total: int) -> dict:
    total_pages = ceil(total / limit) if limit else 0
    return {
        'current_page': page,
        'total_pages': total_pages,
        'has_next': page < total_pages,
        'has_prev': page > 1,
    }


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    has_next: bool
    has_prev: bool


class IssuePagination(Pagination):
    total_issues: int


class FlagPagination(Pagination):
    total_flags: int
