"""Safe execution wrapper for GDAL/OGR command-line utilities.

Region polygons are published as ESRI shapefiles (CAOP). Rather than
parsing them in Python, the loader asks ``ogr2ogr`` to rewrite them as
GeoJSON in their native coordinate system and reads the result. This
module runs that conversion as a subprocess and turns a non-zero exit into
a CommandError carrying the tool's stderr.

Example:
    Convert a shapefile to GeoJSON:
        >>> from geoapi.utils.gdal_helpers import convert_to_geojson
        >>> convert_to_geojson(
        ...     pathlib.Path("res/cont/Cont_AAD_CAOP2020.shp"),
        ...     pathlib.Path("/tmp/geoapi/geojson/cont.geojson"),
        ... )
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pathlib
    from collections.abc import Iterable


class CommandError(RuntimeError):
    """Exception raised when a GDAL/OGR subprocess command fails.

    Contains the error message from the failed command's stderr output,
    or a generic message when the command printed nothing.
    """


def run_command(
    command: Iterable[str | pathlib.Path],
    workdir: pathlib.Path | None = None,
) -> None:
    """Execute a command and raise on non-zero exit.

    Args:
        command: Iterable arguments to execute (e.g., ["ogr2ogr", "-f", ...]).
        workdir: Optional working directory for the command execution.

    Raises:
        CommandError: if the executable is missing or exits with a non-zero
            status code. The message contains the command's stderr.
    """
    args = [str(part) for part in command]
    try:
        result = subprocess.run(
            args,
            cwd=workdir,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandError(f"Executable not found: {args[0]}") from exc
    if result.returncode != 0:
        raise CommandError(result.stderr.strip() or "Unknown command failure")


def convert_to_geojson(
    source_path: pathlib.Path,
    target_path: pathlib.Path,
) -> pathlib.Path:
    r"""Rewrite any OGR-readable dataset as GeoJSON without reprojecting.

    Coordinates stay in the source's native system; only the container
    format changes. An existing ``target_path`` is removed first, since
    the GeoJSON driver refuses to write over a file.

    Args:
        source_path: Dataset to convert (shapefile, GeoPackage, ...).
        target_path: GeoJSON file to write.

    Returns:
        ``target_path``, for chaining.

    Raises:
        CommandError: If ogr2ogr fails.

    Example:
        The ogr2ogr command executed:
            $ ogr2ogr -f GeoJSON -lco RFC7946=NO \\
            $    /tmp/geoapi/geojson/cont.geojson res/cont/Cont.shp
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.unlink(missing_ok=True)
    run_command(
        (
            "ogr2ogr",
            "-f",
            "GeoJSON",
            "-lco",
            "RFC7946=NO",
            target_path,
            source_path,
        )
    )
    return target_path
