"""Unit tests for utilities in geoapi.utils.gdal_helpers.

This module tests the ogr2ogr command execution helpers, specifically the
`run_command` function, CommandError handling and the GeoJSON conversion.
Tests cover:
    - Successful command execution (zero exit code)
    - Failure handling and error message propagation (nonzero exit code)
    - A missing executable reported as CommandError
    - The ogr2ogr arguments used for conversion

Monkeypatching is used to avoid actual subprocess execution, ensuring tests
are isolated, fast, and reliable.

See Also:
    - backend/geoapi/utils/gdal_helpers.py for implementation details.
"""

import pathlib
import subprocess
from typing import Any

import pytest

from geoapi.utils import gdal_helpers


def test_run_command_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """Command with zero return code should pass."""
    seen: dict[str, Any] = {}

    def fake_run(
        args: list[str],
        **kwargs: Any,
    ) -> subprocess.CompletedProcess[str]:
        """Mock subprocess.run to return a successful CompletedProcess."""
        seen["args"] = args
        return subprocess.CompletedProcess(
            args=args,
            returncode=0,
            stdout="ok",
            stderr="",
        )

    monkeypatch.setattr(gdal_helpers.subprocess, "run", fake_run)
    gdal_helpers.run_command(["echo", pathlib.Path("ok")])
    assert seen["args"] == ["echo", "ok"]


def test_run_command_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Command errors raise CommandError with the stderr message."""

    def fake_run(
        *args: Any,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(
            args=[],
            returncode=1,
            stdout="",
            stderr="Unable to open datasource\n",
        )

    monkeypatch.setattr(gdal_helpers.subprocess, "run", fake_run)
    with pytest.raises(
        gdal_helpers.CommandError, match="Unable to open datasource"
    ):
        gdal_helpers.run_command(["ogr2ogr"])


def test_run_command_missing_executable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fake_run(*args: Any, **kwargs: Any) -> None:
        raise FileNotFoundError("ogr2ogr")

    monkeypatch.setattr(gdal_helpers.subprocess, "run", fake_run)
    with pytest.raises(gdal_helpers.CommandError, match="not found"):
        gdal_helpers.run_command(["ogr2ogr"])


def test_convert_to_geojson(
    tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Stale output is removed and ogr2ogr keeps the native CRS."""
    target = tmp_path / "cache" / "cont.geojson"
    target.parent.mkdir()
    target.write_text("stale", encoding="utf-8")
    source = tmp_path / "cont.shp"
    calls: list[list[str]] = []

    def fake_run_command(command: Any, workdir: Any = None) -> None:
        assert not target.exists()
        calls.append([str(part) for part in command])

    monkeypatch.setattr(gdal_helpers, "run_command", fake_run_command)
    assert gdal_helpers.convert_to_geojson(source, target) == target
    assert calls == [
        [
            "ogr2ogr",
            "-f",
            "GeoJSON",
            "-lco",
            "RFC7946=NO",
            str(target),
            str(source),
        ]
    ]
