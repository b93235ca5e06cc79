"""In-memory reference data: domain models and the administration catalog.

Nothing here is persisted. Regions, features and detail records are loaded
from static files at startup (see geoapi.services.loader) and held in
immutable structures for the lifetime of the process.

Example:
    >>> from geoapi.db import catalog, models
    >>> cat = catalog.AdministrationCatalog(parish_details=[],
    ...                                     municipality_details=[])
"""
