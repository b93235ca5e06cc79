"""Coordinate to administrative region resolution.

The resolver walks the region indexes in configuration order, projects the
query point into each region's coordinate system and asks that region's
polygon index for a covering feature. The first region that answers wins
and no further region is tried.

Regions are expected not to overlap, but the data does not guarantee it
(island groups share a projection and their extents can intersect). When
two regions both contain a point, the one listed first in configuration
wins; reordering the regions changes the answer. Tests pin this behavior.

With ``include_details`` the matched feature is joined against the
administration catalog: the parish by its administrative code and the
municipality by name. Missing detail records leave the corresponding
field as None; they never fail the lookup.

Example:
    >>> from geoapi.services.resolver import GeoResolver
    >>> resolver = GeoResolver(indexes, catalog)
    >>> result = resolver.resolve((-8.514602, 40.153687),
    ...                           include_details=False)
    >>> result.parish, result.municipality, result.district
    ('Coimbra (Sé Nova)', 'Coimbra', 'Coimbra')
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from geoapi.core import errors
from geoapi.db import models
from geoapi.services import projection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geoapi.db import catalog as db_catalog
    from geoapi.services import polygon_index


def _coordinate(value: Any, name: str, limit: float) -> float:
    if isinstance(value, bool):
        raise errors.InvalidQuery(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise errors.InvalidQuery(f"{name} must be a number") from exc
    if not math.isfinite(number) or abs(number) > limit:
        raise errors.InvalidQuery(
            f"{name} must be within [-{limit:g}, {limit:g}]"
        )
    return number


def validate_point(point: Sequence[Any]) -> models.Point:
    """Coerce a ``(lon, lat)`` pair to floats and check the ranges.

    Args:
        point: Longitude and latitude, as numbers or numeric strings.

    Returns:
        The point as a ``(lon, lat)`` float tuple.

    Raises:
        InvalidQuery: If the pair is malformed, non-numeric, non-finite or
            out of range.
    """
    try:
        lon, lat = point
    except (TypeError, ValueError) as exc:
        raise errors.InvalidQuery("point must be a (lon, lat) pair") from exc
    return (
        _coordinate(lon, "longitude", 180.0),
        _coordinate(lat, "latitude", 90.0),
    )


class GeoResolver:
    """Resolve points against ordered regions and join catalog details.

    Holds only read-only references; one instance serves all requests.
    """

    def __init__(
        self,
        regions: Sequence[polygon_index.RegionPolygonIndex],
        catalog: db_catalog.AdministrationCatalog,
    ) -> None:
        self.regions = tuple(regions)
        self.catalog = catalog

    def locate(self, point: models.Point) -> models.Feature:
        """Return the feature of the first region that covers ``point``.

        Raises:
            InvalidProjection: If a region's projection is unusable.
            NotFound: If no region covers the point.
        """
        for index in self.regions:
            x, y = projection.transform(point, index.region.projection)
            feature = index.lookup(x, y)
            if feature is not None:
                return feature
        raise errors.NotFound(
            f"No region contains lon={point[0]}, lat={point[1]}"
        )

    def resolve(
        self, point: Sequence[Any], include_details: bool = False
    ) -> models.LocalResult:
        """Find the parish, municipality and district containing ``point``.

        Args:
            point: ``(lon, lat)`` in WGS84 decimal degrees. Numeric strings
                are accepted and validated.
            include_details: Join parish and municipality detail records.

        Returns:
            LocalResult for the first matching region.

        Raises:
            InvalidQuery: If the point is malformed or out of range. Raised
                before any region is tried.
            NotFound: If no region contains the point.
            InvalidProjection: If a region's projection is unusable.
        """
        feature = self.locate(validate_point(point))
        if not include_details:
            return models.LocalResult(
                parish=feature.parish,
                municipality=feature.municipality,
                district=feature.district,
            )

        parish_detail = None
        if feature.code.strip():
            parish_detail = self.catalog.find_parish_by_code(feature.code)
        municipality_detail = None
        if feature.municipality.strip():
            municipality_detail = self.catalog.find_municipality_by_name(
                feature.municipality
            )
        return models.LocalResult(
            parish=feature.parish,
            municipality=feature.municipality,
            district=feature.district,
            parish_detail=parish_detail,
            municipality_detail=municipality_detail,
        )
