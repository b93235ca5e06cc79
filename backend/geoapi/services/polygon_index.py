"""Point-in-polygon lookup over one region's features.

A RegionPolygonIndex is built once per region at load time and reused by
every request. Each feature geometry is prepared with shapely (``prep``)
and its bounding box cached, so a lookup is a linear scan that rejects
most features on the box test and runs the exact containment test on the
few left.

Boundary policy:
    Boundaries are inclusive: a feature matches when its geometry
    *covers* the point, so points on an outer edge or on the ring of a
    hole belong to the feature. A point on an edge shared by two features
    of the same region is covered by both, and the feature that comes
    first in the region's feature order is returned. The result for such
    points therefore depends only on the data order and is the same on
    every call.

Interior rings (holes) are exclusions: a point strictly inside a hole is
not covered by the polygon that owns the hole. Multipolygons match when
any of their parts covers the point.

Example:
    >>> from geoapi.services.polygon_index import RegionPolygonIndex
    >>> index = RegionPolygonIndex(region)
    >>> feature = index.lookup(-32512.0, 53971.0)
    >>> feature.parish if feature else None
    'Coimbra (Sé Nova)'
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from shapely import prepared
from shapely.geometry import Point

if TYPE_CHECKING:
    from geoapi.db import models

BBox = tuple[float, float, float, float]


class _Entry(NamedTuple):
    bounds: BBox
    geometry: prepared.PreparedGeometry
    feature: models.Feature


class RegionPolygonIndex:
    """Prepared geometries for one region, scanned in feature order."""

    def __init__(self, region: models.Region) -> None:
        """Prepare every feature geometry of ``region``.

        Args:
            region: Region whose features are indexed. Features with empty
                geometries are skipped.
        """
        self.region = region
        self._entries: tuple[_Entry, ...] = tuple(
            _Entry(
                bounds=feature.geometry.bounds,
                geometry=prepared.prep(feature.geometry),
                feature=feature,
            )
            for feature in region.features
            if not feature.geometry.is_empty
        )

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, x: float, y: float) -> models.Feature | None:
        """Return the first feature whose geometry covers ``(x, y)``.

        Args:
            x: Easting (or longitude) in the region's native system.
            y: Northing (or latitude) in the region's native system.

        Returns:
            The first covering Feature in region order, or None.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        point = Point(x, y)
        for entry in self._entries:
            minx, miny, maxx, maxy = entry.bounds
            if x < minx or x > maxx or y < miny or y > maxy:
                continue
            if entry.geometry.covers(point):
                return entry.feature
        return None
