"""Error taxonomy for the resolution core.

The core functions (projection, polygon lookup, catalog and resolver)
report failures by raising one of the exceptions below. They never log and
never translate errors into transport responses; the HTTP layer in
geoapi.api decides the user-visible behavior (status codes, messages).

Example:
    Translate core errors at the edge:
        >>> from geoapi.core import errors
        >>> try:
        ...     resolver.resolve(("abc", 40.1), include_details=False)
        ... except errors.InvalidQuery as exc:
        ...     print(f"bad request: {exc}")
"""

from __future__ import annotations


class GeoApiError(Exception):
    """Base class for all errors raised by the resolution core."""


class InvalidQuery(GeoApiError, ValueError):
    """Malformed or out-of-range input.

    Raised for non-numeric or out-of-range coordinates, and for a lookup
    key (name or code) that is missing or blank.
    """


class InvalidProjection(GeoApiError, ValueError):
    """A region references a projection descriptor pyproj cannot parse.

    This is a configuration error: with a valid configuration it is caught
    at load time and never reaches a request.
    """


class NotFound(GeoApiError, LookupError):
    """A well-formed query legitimately matched nothing."""
