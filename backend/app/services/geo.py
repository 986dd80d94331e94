# app/services/geo.py

import math
from typing import NamedTuple

from ..errors import InvalidCoordinates, InvalidRadius, MissingCoordinates

# Flat-earth approximation: 1 degree of latitude is ~111 km everywhere,
# 1 degree of longitude is ~111 km * cos(latitude).
KM_PER_DEGREE = 111
DEFAULT_RADIUS_KM = 50


class BoundingBox(NamedTuple):
    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    def contains(self, lat: float, lng: float) -> bool:
        return (
            self.lat_min <= lat <= self.lat_max
            and self.lng_min <= lng <= self.lng_max
        )


def _is_absent(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_float(value, error) -> float:
    if isinstance(value, bool):
        raise error
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise error
    if not math.isfinite(out):
        raise error
    return out


def parse_radius(radius_km=None) -> float:
    """Search radius in km; DEFAULT_RADIUS_KM when not given."""
    if _is_absent(radius_km):
        return float(DEFAULT_RADIUS_KM)
    radius = _to_float(radius_km, InvalidRadius())
    if radius <= 0:
        raise InvalidRadius()
    return radius


def bounding_box(center_lat, center_lng, radius_km=None) -> BoundingBox:
    """
    Rectangle of +/- radius_km around (center_lat, center_lng).

    The longitude span widens with latitude; once the half-span reaches
    180 degrees (always the case at the poles, where cos(lat) is 0) the
    box covers every longitude. The box is not wrapped at the antimeridian.
    """
    if _is_absent(center_lat) or _is_absent(center_lng):
        raise MissingCoordinates()

    lat = _to_float(center_lat, InvalidCoordinates())
    lng = _to_float(center_lng, InvalidCoordinates())

    radius = parse_radius(radius_km)

    lat_delta = radius / KM_PER_DEGREE

    cos_lat = math.cos(lat * math.pi / 180)
    lng_delta = math.inf if cos_lat <= 0 else radius / (KM_PER_DEGREE * cos_lat)

    if not math.isfinite(lng_delta) or lng_delta >= 180:
        lng_min, lng_max = -180.0, 180.0
    else:
        lng_min, lng_max = lng - lng_delta, lng + lng_delta

    return BoundingBox(lat - lat_delta, lat + lat_delta, lng_min, lng_max)
