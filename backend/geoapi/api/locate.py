"""Coordinate lookup endpoint.

``GET /?lat=<lat>&lon=<lon>[&detalhes=1]`` returns the parish
(freguesia), municipality (concelho) and district (distrito) containing
the point. With ``detalhes`` set to a non-zero integer the parish and
municipality detail records are included when they exist.

The lookup is CPU-bound; it runs in a worker thread under the configured
timeout so a pathological request cannot hold the event loop.

A 504 only stops the request from waiting. Python threads cannot be
cancelled, so the worker keeps running the lookup to completion and keeps
its slot in the default thread pool until then; the late result is
discarded.

Example:
    Locate a point in Coimbra:
        >>> response = client.get("/", params={"lat": 40.153687,
        ...                                    "lon": -8.514602})
        >>> response.json()
        {'freguesia': 'Coimbra (Sé Nova)', 'concelho': 'Coimbra',
         'distrito': 'Coimbra'}

    Out of scope coordinates:
        >>> client.get("/", params={"lat": 0, "lon": 0}).status_code
        404
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import fastapi

from geoapi.core import config, errors
from geoapi.db import models
from geoapi.services import context

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(tags=["locate"])

BAD_REQUEST = (
    "Wrong request! Example of good request: /?lat=40.153687&lon=-8.514602"
)
OUT_OF_SCOPE = "Results not found. Coordinates out of scope!"


def _get_context() -> context.GeoContext:
    """Resolve the shared lookup context dependency."""
    return context.get_context()


def parse_flag(value: str | None) -> bool:
    """Interpret an integer query flag: non-zero is true, junk is false."""
    if value is None:
        return False
    try:
        return int(value.strip()) != 0
    except ValueError:
        return False


def serialize_result(result: models.LocalResult) -> dict[str, Any]:
    """Convert a LocalResult to the public response shape.

    Detail keys are present only when the corresponding record was found.
    """
    body: dict[str, Any] = {
        "freguesia": result.parish,
        "concelho": result.municipality,
        "distrito": result.district,
    }
    if result.parish_detail is not None:
        body["detalhesFreguesia"] = dict(result.parish_detail.data)
    if result.municipality_detail is not None:
        body["detalhesMunicipio"] = dict(result.municipality_detail.data)
    return body


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> fastapi.Response:
    return fastapi.Response(status_code=204)


@router.get("/")
async def locate(
    lat: str | None = None,
    lon: str | None = None,
    detalhes: str | None = None,
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
    settings: config.Settings = fastapi.Depends(config.get_settings),  # noqa: B008
) -> dict[str, Any]:
    """Return the administrative region containing a WGS84 point.

    Args:
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees.
        detalhes: Integer flag; non-zero includes detail records.
        ctx: Shared lookup context (injected via FastAPI Depends).
        settings: Application settings (injected via FastAPI Depends).

    Returns:
        Dictionary with freguesia, concelho and distrito, plus
        detalhesFreguesia and detalhesMunicipio when requested and found.

    Raises:
        HTTPException: 400 for malformed coordinates, 404 when no region
            contains the point, 504 on timeout, 500 when a region's
            projection is unusable.
    """
    logger.debug("New query: lat=%s lon=%s detalhes=%s", lat, lon, detalhes)
    try:
        result = await asyncio.wait_for(
            asyncio.to_thread(
                ctx.resolver.resolve, (lon, lat), parse_flag(detalhes)
            ),
            timeout=settings.resolve_timeout_seconds,
        )
    except errors.InvalidQuery as exc:
        logger.debug("Rejected query: %s", exc)
        raise fastapi.HTTPException(
            status_code=400, detail=BAD_REQUEST
        ) from exc
    except errors.NotFound as exc:
        logger.debug("Results not found")
        raise fastapi.HTTPException(
            status_code=404, detail=OUT_OF_SCOPE
        ) from exc
    except errors.InvalidProjection as exc:
        logger.error("Region configuration error: %s", exc)
        raise fastapi.HTTPException(
            status_code=500, detail="Region configuration error"
        ) from exc
    except TimeoutError as exc:
        logger.warning("Lookup timed out for lat=%s lon=%s", lat, lon)
        raise fastapi.HTTPException(
            status_code=504, detail="Lookup timed out"
        ) from exc

    logger.debug("Found parish: %s", result.parish)
    return serialize_result(result)
