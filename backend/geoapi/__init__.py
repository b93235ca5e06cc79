"""Package initializer for the geoapi reverse-lookup service.

This package answers "which parish, municipality and district contains
this point?" for the Portuguese administrative map (CAOP), and enriches
the answer with reference records about the matched administrations.

- Region polygons are loaded once at startup, each in its native projected
  coordinate system (mainland, Madeira and the three Azores groups)
- Query points arrive in WGS84 and are projected per region with pyproj
- Point-in-polygon tests use prepared shapely geometries, first match wins
- Parish and municipality detail records are joined by normalized code
  or name
- Exposed through a thin FastAPI layer with CORS enabled

See module sub-docstrings for details on architecture and usage.
"""
