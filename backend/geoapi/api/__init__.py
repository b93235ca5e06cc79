"""API router subpackage for the geoapi service.

This package holds the thin HTTP handlers around the resolution core.
Handlers parse query parameters, call into the shared GeoContext and map
core errors to HTTP status codes. They add no lookup logic of their own.

Submodules:
    - locate: Coordinate lookup (``GET /``) returning parish, municipality
      and district, optionally with detail records.
    - administrations: Detail lookups by name or code and the parish and
      municipality listings.

Paths and response keys (freguesia, concelho, distrito, ...) keep the
public contract of the service, which predates this implementation.
"""
