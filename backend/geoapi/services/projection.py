"""Projection of WGS84 query points into a region's native CRS.

Query points always arrive as geographic WGS84 ``(lon, lat)``. Each region
stores its polygons in its own projected system (PT-TM06/ETRS89 for the
mainland, PTRA08 UTM zones for the islands), so points are projected into
that system before any containment test.

Projection descriptors are anything pyproj accepts: authority codes
("EPSG:3763"), PROJ strings or WKT read from a shapefile's ``.prj``. A
descriptor of None, or one naming WGS84 geographic coordinates, is the
identity.

Example:
    >>> from geoapi.services import projection
    >>> x, y = projection.transform((-8.514602, 40.153687), "EPSG:3763")
    >>> # Coimbra, roughly 32 km west and 54 km north of the PT-TM06 origin
    >>> projection.transform((-8.5, 40.1), None)
    (-8.5, 40.1)
"""

from __future__ import annotations

import functools

import pyproj
import pyproj.exceptions

from geoapi.core import errors

GEOGRAPHIC = "EPSG:4326"

_WGS84 = pyproj.CRS.from_user_input(GEOGRAPHIC)


@functools.lru_cache(maxsize=64)
def _transformer(projection: str | None) -> pyproj.Transformer | None:
    """Return a cached transformer, or None for the identity projection."""
    if projection is None:
        return None
    try:
        target = pyproj.CRS.from_user_input(projection)
    except pyproj.exceptions.CRSError as exc:
        raise errors.InvalidProjection(
            f"Unrecognized projection: {projection!r}"
        ) from exc
    if target.equals(_WGS84, ignore_axis_order=True):
        return None
    return pyproj.Transformer.from_crs(_WGS84, target, always_xy=True)


def validate(projection: str | None) -> None:
    """Raise InvalidProjection now if ``projection`` cannot be used.

    Called by the loader so configuration errors surface at startup rather
    than on the first request.
    """
    _transformer(projection)


def transform(
    point: tuple[float, float], projection: str | None
) -> tuple[float, float]:
    """Project a WGS84 ``(lon, lat)`` point into ``projection``.

    Args:
        point: Longitude and latitude in decimal degrees.
        projection: Target projection descriptor, None for identity.

    Returns:
        ``(x, y)`` in the target system. Points outside the projection's
        domain come back as non-finite numbers, which no polygon contains.

    Raises:
        InvalidProjection: If the descriptor is not recognized.
    """
    transformer = _transformer(projection)
    lon, lat = point
    if transformer is None:
        return (lon, lat)
    x, y = transformer.transform(lon, lat)
    return (x, y)
