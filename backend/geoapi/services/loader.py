"""Startup loading of region polygons and administration records.

This module turns the files named in Settings into the immutable objects
the resolver works with:

- each configured region source becomes a Region with its features in
  source order; GeoJSON is read directly and any other OGR format is first
  converted to GeoJSON by ogr2ogr, keeping its native coordinates
- the region projection comes from the configuration, or from the
  ``.prj`` sidecar next to the source file
- the parish and municipality detail JSON arrays become an
  AdministrationCatalog

Feature properties follow the CAOP attribute names: ``Freguesia``,
``Concelho``, ``Distrito`` and ``Dicofre`` (``DICOFRE`` in some editions).
Features without a polygonal geometry are skipped, invalid polygons are
repaired with ``make_valid``.

Example:
    Load everything the service needs:
        >>> from geoapi.core.config import get_settings
        >>> from geoapi.services import loader
        >>> settings = get_settings()
        >>> regions = loader.load_regions(settings)
        >>> catalog = loader.load_catalog(settings)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from shapely import validation
from shapely.geometry import MultiPolygon, Polygon, shape

from geoapi.core import errors
from geoapi.db import catalog as db_catalog
from geoapi.db import models
from geoapi.services import projection
from geoapi.utils import gdal_helpers

if TYPE_CHECKING:
    import pathlib
    from collections.abc import Mapping

    from shapely.geometry.base import BaseGeometry

    from geoapi.core import config

logger = logging.getLogger(__name__)

GEOJSON_SUFFIXES = frozenset({".geojson", ".json"})
PARISH_KEY = "Freguesia"
MUNICIPALITY_KEY = "Concelho"
DISTRICT_KEY = "Distrito"
CODE_KEYS = ("Dicofre", "DICOFRE")


class DataLoadError(RuntimeError):
    """Raised when a data file exists but its content is unusable."""


def _read_json(path: pathlib.Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise DataLoadError(f"{path}: invalid JSON ({exc})") from exc


def _read_projection(
    source: config.RegionSource, path: pathlib.Path
) -> str:
    """Return the configured projection or the ``.prj`` sidecar's WKT."""
    if source.projection:
        return source.projection
    prj_path = path.with_suffix(".prj")
    if not prj_path.exists():
        raise errors.InvalidProjection(
            f"Region {source.id!r} has no projection configured and no "
            f"{prj_path.name} next to its source"
        )
    return prj_path.read_text(encoding="utf-8").strip()


def _read_feature_collection(
    source: config.RegionSource,
    path: pathlib.Path,
    settings: config.Settings,
) -> Mapping[str, Any]:
    """Read a region source as a GeoJSON FeatureCollection."""
    if not path.exists():
        raise FileNotFoundError(f"Region source not found: {path}")
    if path.suffix.lower() not in GEOJSON_SUFFIXES:
        settings.ensure_directories()
        target = settings.geojson_cache_dir / f"{source.id}.geojson"
        logger.info("Converting %s to GeoJSON at %s", path, target)
        path = gdal_helpers.convert_to_geojson(path, target)
    collection = _read_json(path)
    if (
        not isinstance(collection, dict)
        or collection.get("type") != "FeatureCollection"
        or not isinstance(collection.get("features"), list)
    ):
        raise DataLoadError(f"{path}: not a GeoJSON FeatureCollection")
    return collection


def _polygonal(geometry: BaseGeometry) -> BaseGeometry | None:
    """Repair ``geometry`` if needed and keep only its polygonal parts."""
    if not geometry.is_valid:
        geometry = validation.make_valid(geometry)
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    parts = [
        part
        for part in getattr(geometry, "geoms", ())
        if isinstance(part, (Polygon, MultiPolygon))
    ]
    if not parts:
        return None
    polygons: list[Polygon] = []
    for part in parts:
        polygons.extend(
            part.geoms if isinstance(part, MultiPolygon) else [part]
        )
    return MultiPolygon(polygons)


def _property(properties: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = properties.get(key)
        if value is not None:
            return str(value)
    return ""


def to_feature(raw: Mapping[str, Any]) -> models.Feature | None:
    """Convert one GeoJSON feature into a Feature.

    Args:
        raw: GeoJSON feature mapping with CAOP properties.

    Returns:
        The Feature, or None if it has no polygonal geometry.
    """
    if not raw.get("geometry"):
        return None
    try:
        geometry = _polygonal(shape(raw["geometry"]))
    except (ValueError, TypeError, AttributeError, KeyError) as exc:
        raise DataLoadError(f"Unreadable geometry: {exc}") from exc
    if geometry is None or geometry.is_empty:
        return None
    properties = raw.get("properties") or {}
    return models.Feature(
        parish=_property(properties, PARISH_KEY),
        municipality=_property(properties, MUNICIPALITY_KEY),
        district=_property(properties, DISTRICT_KEY),
        code=_property(properties, *CODE_KEYS),
        geometry=geometry,
    )


def load_region(
    source: config.RegionSource, settings: config.Settings
) -> models.Region:
    """Load one region's polygons and projection.

    Args:
        source: Region source from configuration.
        settings: Application settings (data directory, cache directory).

    Returns:
        Region with features in source order.

    Raises:
        FileNotFoundError: If the source file is missing.
        InvalidProjection: If no usable projection can be determined.
        DataLoadError: If the source is not a FeatureCollection.
        CommandError: If the ogr2ogr conversion fails.
    """
    path = settings.resolve_path(source.source)
    region_projection = _read_projection(source, path)
    projection.validate(region_projection)

    collection = _read_feature_collection(source, path, settings)
    features: list[models.Feature] = []
    skipped = 0
    for raw in collection["features"]:
        feature = to_feature(raw)
        if feature is None:
            skipped += 1
            continue
        features.append(feature)
    if skipped:
        logger.warning(
            "Region %s: skipped %d features without polygons",
            source.id,
            skipped,
        )
    logger.info("Loaded region %s: %d features", source.id, len(features))
    return models.Region(
        id=source.id,
        projection=region_projection,
        features=tuple(features),
    )


def load_regions(settings: config.Settings) -> tuple[models.Region, ...]:
    """Load all configured regions, preserving configuration order."""
    return tuple(load_region(source, settings) for source in settings.regions)


def _read_records(path: pathlib.Path) -> list[Mapping[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Detail file not found: {path}")
    records = _read_json(path)
    if not isinstance(records, list) or not all(
        isinstance(record, dict) for record in records
    ):
        raise DataLoadError(f"{path}: expected a JSON array of objects")
    return records


def load_catalog(settings: config.Settings) -> db_catalog.AdministrationCatalog:
    """Load parish and municipality detail records into a catalog.

    Raises:
        FileNotFoundError: If a detail file is missing.
        DataLoadError: If a detail file is not a JSON array of objects.
    """
    parishes = _read_records(
        settings.resolve_path(settings.parish_details_file)
    )
    municipalities = _read_records(
        settings.resolve_path(settings.municipality_details_file)
    )
    logger.info(
        "Loaded %d parish and %d municipality detail records",
        len(parishes),
        len(municipalities),
    )
    return db_catalog.AdministrationCatalog(
        parish_details=[models.ParishDetail.from_mapping(p) for p in parishes],
        municipality_details=[
            models.MunicipalityDetail.from_mapping(m) for m in municipalities
        ],
    )
