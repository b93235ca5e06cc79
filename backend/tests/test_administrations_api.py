"""API tests for the parish and municipality reference endpoints.

The lookup context is injected through dependency overrides (see the
``client`` fixture).

See Also:
    - backend/geoapi/api/administrations.py for the implementation.
"""

from __future__ import annotations

import pytest
from fastapi import testclient


@pytest.mark.parametrize("name", ["coimbra", "COIMBRA ", "  Coimbra"])
def test_municipality_detail(client: testclient.TestClient, name: str) -> None:
    """Municipality names match regardless of case and whitespace."""
    response = client.get("/detalheMunicipio", params={"nome": name})
    assert response.status_code == 200
    assert response.json()["codigo"] == "0603"


def test_municipality_detail_not_found(
    client: testclient.TestClient,
) -> None:
    response = client.get("/detalheMunicipio", params={"nome": "Atlantis"})
    assert response.status_code == 404
    assert "/listaDeMunicipios" in response.json()["detail"]


def test_municipality_detail_missing_name(
    client: testclient.TestClient,
) -> None:
    response = client.get("/detalheMunicipio")
    assert response.status_code == 400


@pytest.mark.parametrize(
    "name", ["Sé Nova", "coimbra (sé nova)", "SÉ NOVA, COIMBRA "]
)
def test_parish_detail_by_name(
    client: testclient.TestClient, name: str
) -> None:
    response = client.get("/detalheFreguesia", params={"nome": name})
    assert response.status_code == 200
    assert response.json()["codigoine"] == "060321"


@pytest.mark.parametrize("code", ["03241", "3241"])
def test_parish_detail_by_code(
    client: testclient.TestClient, code: str
) -> None:
    """Leading zeros do not matter."""
    response = client.get("/detalheFreguesia", params={"codigo": code})
    assert response.status_code == 200
    assert response.json()["nome"] == "Vila Nova"


def test_parish_detail_code_takes_precedence(
    client: testclient.TestClient,
) -> None:
    response = client.get(
        "/detalheFreguesia", params={"codigo": "310107", "nome": "Sé Nova"}
    )
    assert response.status_code == 200
    assert response.json()["municipio"] == "Funchal"


def test_parish_detail_not_found(client: testclient.TestClient) -> None:
    response = client.get("/detalheFreguesia", params={"nome": "Atlantis"})
    assert response.status_code == 404
    assert "/listaDeFreguesias" in response.json()["detail"]


@pytest.mark.parametrize("code", ["0", "000"])
def test_parish_detail_all_zero_code_not_found(
    client: testclient.TestClient, code: str
) -> None:
    response = client.get("/detalheFreguesia", params={"codigo": code})
    assert response.status_code == 404


def test_parish_detail_missing_parameters(
    client: testclient.TestClient,
) -> None:
    response = client.get("/detalheFreguesia")
    assert response.status_code == 400


def test_list_parishes(client: testclient.TestClient) -> None:
    response = client.get("/listaDeFreguesias")
    assert response.status_code == 200
    assert response.json() == [
        "Coimbra (Sé Nova)",
        "Vila Nova (Barcelos)",
        "Funchal (Sé)",
    ]


def test_list_municipalities(client: testclient.TestClient) -> None:
    response = client.get("/listaDeMunicipios")
    assert response.status_code == 200
    assert response.json() == ["Barcelos", "Coimbra", "Funchal"]


def test_list_municipalities_with_parishes(
    client: testclient.TestClient,
) -> None:
    response = client.get("/listaDeMunicipiosComFreguesias")
    assert response.status_code == 200
    assert response.json() == [
        {"nome": "Barcelos", "freguesias": ["Vila Nova (Barcelos)"]},
        {"nome": "Coimbra", "freguesias": ["Coimbra (Sé Nova)"]},
        {"nome": "Funchal", "freguesias": ["Funchal (Sé)"]},
    ]


def test_unknown_route_is_404(client: testclient.TestClient) -> None:
    assert client.get("/nope").status_code == 404
