"""Application settings and configuration management.

This module provides Pydantic-based settings management that loads
configuration from environment variables or a .env file. Settings include
the data directory, the ordered list of region sources (each a polygon
dataset in its own projection), the administration detail files, the
GeoJSON conversion cache, CORS origins, server binding, logging and the
per-request resolve timeout.

The order of ``regions`` is significant: regions are tried in this order
and the first one whose polygons contain a query point wins.

Example:
    Settings can be accessed via the cached get_settings() function:
        >>> from geoapi.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.data_dir)

    Environment variables can override defaults:
        >>> DATA_DIR=/srv/caop
        >>> PORT=9000
        >>> REGIONS='[{"id": "cont", "source": "cont.geojson",
        ...            "projection": "EPSG:3763"}]'
"""

import functools
import pathlib

import pydantic
import pydantic_settings


class RegionSource(pydantic.BaseModel):
    """Where to load one region's polygons from.

    Attributes:
        id: Region identifier (e.g. "cont", "ArqMadeira").
        source: Polygon dataset path, relative to ``data_dir`` unless
            absolute. GeoJSON is read directly; other OGR formats are
            converted with ogr2ogr first.
        projection: Projection descriptor understood by pyproj. When
            omitted, the ``.prj`` sidecar next to ``source`` is used.
    """

    id: str
    source: pathlib.Path
    projection: str | None = None


DEFAULT_REGIONS: list[RegionSource] = [
    RegionSource(
        id="cont",
        source=pathlib.Path("cont/Cont_AAD_CAOP2020.shp"),
        projection="EPSG:3763",
    ),
    RegionSource(
        id="ArqMadeira",
        source=pathlib.Path("madeira/ArqMadeira_AAD_CAOP2020.shp"),
        projection="EPSG:5016",
    ),
    RegionSource(
        id="ArqAcores_GOcidental",
        source=pathlib.Path("acores/ArqAcores_GOcidental_AAd_CAOP2020.shp"),
        projection="EPSG:5014",
    ),
    RegionSource(
        id="ArqAcores_GCentral",
        source=pathlib.Path("acores/ArqAcores_GCentral_AAd_CAOP2020.shp"),
        projection="EPSG:5015",
    ),
    RegionSource(
        id="ArqAcores_GOriental",
        source=pathlib.Path("acores/ArqAcores_GOriental_AAd_CAOP2020.shp"),
        projection="EPSG:5015",
    ),
]


class Settings(pydantic_settings.BaseSettings):
    """Runtime configuration pulled from environment variables or defaults.

    All settings can be overridden via environment variables or .env file.
    The GeoJSON cache directory is created on demand via
    ensure_directories().

    Attributes:
        data_dir: Base directory for region sources and detail files.
        regions: Ordered region sources; order is the overlap tie-break.
        parish_details_file: JSON array of parish detail records.
        municipality_details_file: JSON array of municipality records.
        geojson_cache_dir: Where ogr2ogr writes converted GeoJSON files.
        allow_origins: List of allowed CORS origins (["*"] allows all).
        host: Interface the CLI binds the server to.
        port: Port the CLI binds the server to.
        log_level: Root logging level name.
        json_logs: Emit JSON log lines instead of plain text.
        resolve_timeout_seconds: Upper bound for one coordinate lookup.

    Example:
        Create settings with custom values:
            >>> settings = Settings(
            ...     data_dir=Path("/srv/caop"),
            ...     port=9000,
            ...     regions=[RegionSource(id="cont", source=Path("c.geojson"),
            ...                           projection="EPSG:3763")],
            ... )
            >>> settings.ensure_directories()
    """

    data_dir: pathlib.Path = pathlib.Path("res")
    regions: list[RegionSource] = DEFAULT_REGIONS
    parish_details_file: pathlib.Path = pathlib.Path(
        "detalhesFreguesias.json"
    )
    municipality_details_file: pathlib.Path = pathlib.Path(
        "detalhesMunicipios.json"
    )
    geojson_cache_dir: pathlib.Path = pathlib.Path("/tmp/geoapi/geojson")
    allow_origins: list[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    json_logs: bool = True
    resolve_timeout_seconds: float = pydantic.Field(default=5.0, gt=0)

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def resolve_path(self, path: pathlib.Path) -> pathlib.Path:
        """Return ``path`` anchored at ``data_dir`` unless already absolute."""
        return path if path.is_absolute() else self.data_dir / path

    def ensure_directories(self) -> None:
        """Create the directory ogr2ogr writes converted GeoJSON into."""
        self.geojson_cache_dir.mkdir(parents=True, exist_ok=True)


@functools.lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables or .env file and cached
    for the lifetime of the application. Subsequent calls return the same
    cached instance.

    Returns:
        Settings instance with all configuration values populated.

    Example:
        The settings are cached, so multiple calls return the same instance:
            >>> settings1 = get_settings()
            >>> settings2 = get_settings()
            >>> assert settings1 is settings2  # Same instance
    """
    return Settings()
