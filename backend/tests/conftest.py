"""Shared fixtures: small regions, a catalog and a wired test client.

The mainland fixture uses the real PT-TM06/ETRS89 projection (EPSG:3763)
with a square around Coimbra; the Madeira fixture builds its square around
the projected position of Funchal so the tests do not depend on
hand-computed coordinates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import testclient
from shapely.geometry import box

from geoapi import main
from geoapi.api import administrations, locate
from geoapi.db import catalog as db_catalog
from geoapi.db import models
from geoapi.services import context, projection

from factories import (
    FUNCHAL,
    MUNICIPALITY_RECORDS,
    PARISH_RECORDS,
    make_feature,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def mainland_region() -> models.Region:
    """Mainland region in EPSG:3763 with Coimbra and a distant parish."""
    return models.Region(
        id="cont",
        projection="EPSG:3763",
        features=(
            make_feature(
                "Coimbra (Sé Nova)",
                box(-40000, 45000, -25000, 60000),
                municipality="Coimbra",
                district="Coimbra",
                code="060321",
            ),
            make_feature(
                "Estrela",
                box(-100000, -110000, -80000, -90000),
                municipality="Lisboa",
                district="Lisboa",
                code="110660",
            ),
        ),
    )


@pytest.fixture
def madeira_region() -> models.Region:
    """Madeira region in EPSG:5016 with a square around Funchal."""
    x, y = projection.transform(FUNCHAL, "EPSG:5016")
    return models.Region(
        id="ArqMadeira",
        projection="EPSG:5016",
        features=(
            make_feature(
                "Funchal (Sé)",
                box(x - 2000, y - 2000, x + 2000, y + 2000),
                municipality="Funchal",
                district="Madeira",
                code="310107",
            ),
        ),
    )


@pytest.fixture
def catalog() -> db_catalog.AdministrationCatalog:
    return db_catalog.AdministrationCatalog(
        parish_details=[
            models.ParishDetail.from_mapping(p) for p in PARISH_RECORDS
        ],
        municipality_details=[
            models.MunicipalityDetail.from_mapping(m)
            for m in MUNICIPALITY_RECORDS
        ],
    )


@pytest.fixture
def geo_context(
    mainland_region: models.Region,
    madeira_region: models.Region,
    catalog: db_catalog.AdministrationCatalog,
) -> context.GeoContext:
    return context.build_context([mainland_region, madeira_region], catalog)


@pytest.fixture
def client(geo_context: context.GeoContext) -> Iterator[testclient.TestClient]:
    """Test client with the lookup context injected via overrides."""
    app = main.create_app()
    app.dependency_overrides[locate._get_context] = lambda: geo_context
    app.dependency_overrides[administrations._get_context] = (
        lambda: geo_context
    )
    try:
        yield testclient.TestClient(app)
    finally:
        app.dependency_overrides.clear()
