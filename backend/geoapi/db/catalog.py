"""In-memory administration catalog with normalized lookups.

The catalog holds the parish and municipality detail records loaded at
startup and answers three kinds of lookups:

- parish by administrative code, compared after stripping leading zeros
- parish by name, matching the short name, the full name or the alternate
  full name
- municipality by name

Name comparisons are case-insensitive and ignore surrounding whitespace.
All lookups are linear scans in catalog order and return the first match;
the scan order is part of the contract. Normalized keys and the listing
views are computed once in the constructor and never recomputed.

Example:
    >>> from geoapi.db import catalog, models
    >>> cat = catalog.AdministrationCatalog(
    ...     parish_details=[models.ParishDetail.from_mapping(p)
    ...                     for p in raw_parishes],
    ...     municipality_details=[models.MunicipalityDetail.from_mapping(m)
    ...                           for m in raw_municipalities],
    ... )
    >>> cat.find_parish_by_code("03241") is cat.find_parish_by_code("3241")
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from geoapi.core import errors
from geoapi.db import models

if TYPE_CHECKING:
    from collections.abc import Iterable


def normalize_name(value: str) -> str:
    """Lowercase and trim a name for comparison."""
    return value.strip().lower()


def normalize_code(value: str | int) -> str:
    """Strip surrounding whitespace and leading zeros from a code."""
    return str(value).strip().lstrip("0")


def _require(value: str | int | None, what: str) -> str | int:
    if value is None or not str(value).strip():
        raise errors.InvalidQuery(f"Missing {what}")
    return value


class AdministrationCatalog:
    """Parish and municipality reference records.

    Instances are immutable after construction and safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        parish_details: Iterable[models.ParishDetail],
        municipality_details: Iterable[models.MunicipalityDetail],
    ) -> None:
        """Build lookup keys and listing views.

        Args:
            parish_details: Parish records in catalog order.
            municipality_details: Municipality records in catalog order.
        """
        self.parish_details: tuple[models.ParishDetail, ...] = tuple(
            parish_details
        )
        self.municipality_details: tuple[models.MunicipalityDetail, ...] = (
            tuple(municipality_details)
        )

        # Records without a usable code ("" or all zeros) are not
        # reachable by code.
        self._parish_codes = tuple(
            (code, p)
            for code, p in (
                (normalize_code(p.code), p) for p in self.parish_details
            )
            if code
        )
        self._parish_names = tuple(
            (
                frozenset(
                    normalize_name(n)
                    for n in (p.name, p.full_name, p.alternate_full_name)
                ),
                p,
            )
            for p in self.parish_details
        )
        self._municipality_names = tuple(
            (normalize_name(m.name), m) for m in self.municipality_details
        )

        self._parish_name_list = tuple(
            p.full_name or p.name for p in self.parish_details
        )
        self._municipality_name_list = tuple(
            dict.fromkeys(m.name for m in self.municipality_details)
        )
        parishes_by_municipality: dict[str, list[str]] = {}
        for p in self.parish_details:
            parishes_by_municipality.setdefault(
                normalize_name(p.municipality), []
            ).append(p.full_name or p.name)
        self._municipalities_with_parishes = tuple(
            models.MunicipalityWithParishes(
                name=name,
                parishes=tuple(
                    parishes_by_municipality.get(normalize_name(name), ())
                ),
            )
            for name in self._municipality_name_list
        )

    def find_parish_by_code(
        self, code: str | int | None
    ) -> models.ParishDetail | None:
        """Return the first parish whose code matches, ignoring leading zeros.

        Args:
            code: Administrative code, e.g. "03241", "3241" or 3241.

        Returns:
            The matching ParishDetail, or None. An all-zero code matches
            nothing, not even records stored without a code.

        Raises:
            InvalidQuery: If ``code`` is missing or blank.
        """
        wanted = normalize_code(_require(code, "parish code"))
        for stored, parish in self._parish_codes:
            if stored == wanted:
                return parish
        return None

    def find_parish_by_name(
        self, name: str | None
    ) -> models.ParishDetail | None:
        """Return the first parish matching any of its three name fields.

        Args:
            name: Parish name in any case, surrounding whitespace ignored.

        Returns:
            The matching ParishDetail, or None.

        Raises:
            InvalidQuery: If ``name`` is missing or blank.
        """
        wanted = normalize_name(str(_require(name, "parish name")))
        for names, parish in self._parish_names:
            if wanted in names:
                return parish
        return None

    def find_municipality_by_name(
        self, name: str | None
    ) -> models.MunicipalityDetail | None:
        """Return the first municipality whose name matches.

        Raises:
            InvalidQuery: If ``name`` is missing or blank.
        """
        wanted = normalize_name(str(_require(name, "municipality name")))
        for stored, municipality in self._municipality_names:
            if stored == wanted:
                return municipality
        return None

    def list_parish_names(self) -> tuple[str, ...]:
        return self._parish_name_list

    def list_municipality_names(self) -> tuple[str, ...]:
        return self._municipality_name_list

    def list_municipalities_with_parishes(
        self,
    ) -> tuple[models.MunicipalityWithParishes, ...]:
        return self._municipalities_with_parishes
