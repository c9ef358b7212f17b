"""Great-circle helpers for radius queries.

The store has no spatial index, so a radius query is a bounding-box
prefilter in SQL followed by an exact haversine check in Python.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_METERS = 6371000.0
METERS_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_METERS / 180.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lng2 - lng1)
    a = math.sin(delta_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2.0) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    # None when the box wraps a pole or the antimeridian
    min_lng: Optional[float]
    max_lng: Optional[float]


@dataclass(frozen=True)
class RadiusFilter:
    latitude: float
    longitude: float
    radius: float

    def bounding_box(self) -> BoundingBox:
        delta_lat = self.radius / METERS_PER_DEGREE_LAT
        min_lat = self.latitude - delta_lat
        max_lat = self.latitude + delta_lat
        if min_lat <= -90 or max_lat >= 90:
            return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), None, None)

        ratio = math.sin(self.radius / EARTH_RADIUS_METERS) / math.cos(math.radians(self.latitude))
        if ratio >= 1:
            return BoundingBox(min_lat, max_lat, None, None)
        delta_lng = math.degrees(math.asin(ratio))
        min_lng = self.longitude - delta_lng
        max_lng = self.longitude + delta_lng
        if min_lng < -180 or max_lng > 180:
            return BoundingBox(min_lat, max_lat, None, None)
        return BoundingBox(min_lat, max_lat, min_lng, max_lng)

    def distance_to(self, latitude: float, longitude: float) -> float:
        return haversine_distance(self.latitude, self.longitude, latitude, longitude)

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.distance_to(latitude, longitude) <= self.radius


def offset_point(latitude: float, longitude: float, meters_north: float = 0.0, meters_east: float = 0.0) -> tuple[float, float]:
    """Move a point by a small north/east displacement, returning ``(lat, lng)``."""
    new_lat = latitude + meters_north / METERS_PER_DEGREE_LAT
    new_lng = longitude + meters_east / (METERS_PER_DEGREE_LAT * math.cos(math.radians(latitude)))
    return new_lat, new_lng
