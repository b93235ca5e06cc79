"""Read-only lookup context shared by all requests.

GeoContext bundles the region indexes, the administration catalog and the
resolver built on them. It is assembled once, before the server accepts
requests, and handed to request handlers through a FastAPI dependency;
nothing in it is mutated afterwards.

Example:
    Build a context from already loaded data (tests, scripts):
        >>> from geoapi.services import context
        >>> ctx = context.build_context(regions, catalog)
        >>> ctx.resolver.resolve((-8.514602, 40.153687))

    Or load it from settings, once per process:
        >>> ctx = context.get_context()
"""

from __future__ import annotations

import dataclasses
import functools
from typing import TYPE_CHECKING

from geoapi.core import config
from geoapi.services import loader, polygon_index
from geoapi.services import resolver as geo_resolver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from geoapi.db import catalog as db_catalog
    from geoapi.db import models


@dataclasses.dataclass(frozen=True)
class GeoContext:
    """Everything a request needs, shared by reference.

    Attributes:
        regions: Region indexes in configuration order.
        catalog: Administration detail records.
        resolver: Resolver over ``regions`` and ``catalog``.
    """

    regions: tuple[polygon_index.RegionPolygonIndex, ...]
    catalog: db_catalog.AdministrationCatalog
    resolver: geo_resolver.GeoResolver


def build_context(
    regions: Iterable[models.Region],
    catalog: db_catalog.AdministrationCatalog,
) -> GeoContext:
    """Index ``regions`` and wire them to a resolver.

    Args:
        regions: Loaded regions; their order is the overlap tie-break.
        catalog: Loaded administration catalog.

    Returns:
        A ready GeoContext.
    """
    indexes = tuple(polygon_index.RegionPolygonIndex(r) for r in regions)
    return GeoContext(
        regions=indexes,
        catalog=catalog,
        resolver=geo_resolver.GeoResolver(indexes, catalog),
    )


@functools.lru_cache
def get_context() -> GeoContext:
    """Load and cache the process-wide context from settings.

    The first call reads every data file; later calls return the same
    instance.
    """
    settings = config.get_settings()
    return build_context(
        loader.load_regions(settings), loader.load_catalog(settings)
    )
