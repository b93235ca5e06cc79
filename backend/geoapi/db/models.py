"""Data models for regions, features and administration records.

This module defines the immutable data structures shared by the loader,
the resolution core and the HTTP layer. Everything here is built once at
startup and read concurrently afterwards, hence frozen dataclasses and
tuples throughout.

Example:
    Creating a Region with a single parish feature:
        >>> from shapely.geometry import box
        >>> from geoapi.db.models import Feature, Region
        >>> feature = Feature(
        ...     parish="Coimbra (Sé Nova)",
        ...     municipality="Coimbra",
        ...     district="Coimbra",
        ...     code="060321",
        ...     geometry=box(-40000, 45000, -25000, 60000),
        ... )
        >>> region = Region(id="cont", projection="EPSG:3763",
        ...                 features=(feature,))

    Wrapping a raw parish detail record:
        >>> detail = ParishDetail.from_mapping({
        ...     "codigoine": "060321",
        ...     "nome": "Sé Nova",
        ...     "nomecompleto": "Coimbra (Sé Nova)",
        ...     "nomecompleto2": "Sé Nova, Coimbra",
        ...     "municipio": "Coimbra",
        ... })
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from shapely.geometry.base import BaseGeometry

Point = tuple[float, float]


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


@dataclasses.dataclass(frozen=True)
class Feature:
    """A parish polygon (or multipolygon) with its administrative labels.

    Attributes:
        parish: Parish name ("Freguesia").
        municipality: Municipality name ("Concelho").
        district: District or island name ("Distrito").
        code: Administrative code ("Dicofre"), may carry leading zeros.
        geometry: Shapely Polygon or MultiPolygon in the region's native
            coordinate system.
    """

    parish: str
    municipality: str
    district: str
    code: str
    geometry: BaseGeometry = dataclasses.field(repr=False, compare=False)


@dataclasses.dataclass(frozen=True)
class Region:
    """One projected coordinate system paired with its polygon features.

    Attributes:
        id: Region identifier from configuration.
        projection: Projection descriptor understood by pyproj.
        features: Polygon features in source order.
    """

    id: str
    projection: str | None
    features: tuple[Feature, ...]


@dataclasses.dataclass(frozen=True)
class ParishDetail:
    """Reference record about a parish.

    Only the fields used for matching are lifted out of ``data``; the full
    raw record is kept untouched and is what clients receive.
    """

    code: str
    name: str
    full_name: str
    alternate_full_name: str
    municipality: str
    data: dict[str, Any] = dataclasses.field(
        default_factory=dict, repr=False, hash=False
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ParishDetail:
        return cls(
            code=_text(raw, "codigoine"),
            name=_text(raw, "nome"),
            full_name=_text(raw, "nomecompleto"),
            alternate_full_name=_text(raw, "nomecompleto2"),
            municipality=_text(raw, "municipio"),
            data=dict(raw),
        )


@dataclasses.dataclass(frozen=True)
class MunicipalityDetail:
    """Reference record about a municipality."""

    name: str
    data: dict[str, Any] = dataclasses.field(
        default_factory=dict, repr=False, hash=False
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> MunicipalityDetail:
        return cls(name=_text(raw, "nome"), data=dict(raw))


@dataclasses.dataclass(frozen=True)
class MunicipalityWithParishes:
    name: str
    parishes: tuple[str, ...]


@dataclasses.dataclass(frozen=True)
class LocalResult:
    """Outcome of a successful coordinate lookup.

    Attributes:
        parish: Parish name of the containing feature.
        municipality: Municipality name of the containing feature.
        district: District name of the containing feature.
        parish_detail: Parish reference record, when requested and found.
        municipality_detail: Municipality reference record, when requested
            and found.
    """

    parish: str
    municipality: str
    district: str
    parish_detail: ParishDetail | None = None
    municipality_detail: MunicipalityDetail | None = None
