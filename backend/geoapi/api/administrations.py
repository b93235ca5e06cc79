"""Parish and municipality reference endpoints.

These handlers expose the administration catalog directly:

- ``GET /detalheMunicipio?nome=`` returns one municipality record
- ``GET /detalheFreguesia?nome=`` or ``?codigo=`` returns one parish record
- ``GET /listaDeFreguesias`` lists parish names
- ``GET /listaDeMunicipios`` lists municipality names
- ``GET /listaDeMunicipiosComFreguesias`` lists municipalities with their
  parishes

Name matching ignores case and surrounding whitespace; codes ignore
leading zeros.

Example:
    >>> client.get("/detalheMunicipio", params={"nome": "COIMBRA "}).json()
    {'nome': 'Coimbra', ...}
    >>> client.get("/listaDeMunicipios").json()[:2]
    ['Abrantes', 'Águeda']
"""

from __future__ import annotations

from typing import Any

import fastapi

from geoapi.core import errors
from geoapi.services import context

router = fastapi.APIRouter(tags=["administrations"])


def _get_context() -> context.GeoContext:
    """Resolve the shared lookup context dependency."""
    return context.get_context()


def _bad_request(exc: errors.InvalidQuery) -> fastapi.HTTPException:
    return fastapi.HTTPException(status_code=400, detail=str(exc))


@router.get("/detalheMunicipio")
async def municipality_detail(
    nome: str | None = None,
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
) -> dict[str, Any]:
    """Return the detail record of a municipality by name.

    Raises:
        HTTPException: 400 if ``nome`` is missing, 404 if no municipality
            has that name.
    """
    try:
        municipality = ctx.catalog.find_municipality_by_name(nome)
    except errors.InvalidQuery as exc:
        raise _bad_request(exc) from exc
    if municipality is None:
        raise fastapi.HTTPException(
            status_code=404,
            detail=(
                "Municipality not found with that name. "
                "Check a list of municipalities with /listaDeMunicipios"
            ),
        )
    return dict(municipality.data)


@router.get("/detalheFreguesia")
async def parish_detail(
    nome: str | None = None,
    codigo: str | None = None,
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
) -> dict[str, Any]:
    """Return the detail record of a parish by name or administrative code.

    When both are given, the code takes precedence.

    Args:
        nome: Short, full or alternate full parish name.
        codigo: Administrative code, leading zeros optional.
        ctx: Shared lookup context (injected via FastAPI Depends).

    Raises:
        HTTPException: 400 if neither parameter is given, 404 if no parish
            matches.
    """
    try:
        if codigo is not None:
            parish = ctx.catalog.find_parish_by_code(codigo)
        else:
            parish = ctx.catalog.find_parish_by_name(nome)
    except errors.InvalidQuery as exc:
        raise _bad_request(exc) from exc
    if parish is None:
        raise fastapi.HTTPException(
            status_code=404,
            detail=(
                "Parish not found with that name or code. "
                "Check a list of parishes with /listaDeFreguesias"
            ),
        )
    return dict(parish.data)


@router.get("/listaDeFreguesias")
async def list_parishes(
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
) -> list[str]:
    return list(ctx.catalog.list_parish_names())


@router.get("/listaDeMunicipios")
async def list_municipalities(
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
) -> list[str]:
    return list(ctx.catalog.list_municipality_names())


@router.get("/listaDeMunicipiosComFreguesias")
async def list_municipalities_with_parishes(
    ctx: context.GeoContext = fastapi.Depends(_get_context),  # noqa: B008
) -> list[dict[str, Any]]:
    """List every municipality with the names of its parishes."""
    return [
        {"nome": entry.name, "freguesias": list(entry.parishes)}
        for entry in ctx.catalog.list_municipalities_with_parishes()
    ]
