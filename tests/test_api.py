"""
🧪 test_api.py — GET /menu/{slug}/calculate-delivery

The database-backed resolver and the geocoder are replaced through
FastAPI dependency overrides; the app lifespan is not started.
"""

import dataclasses

import pytest
from fastapi.testclient import TestClient

from menu_delivery.main import app, get_config_resolver
from menu_delivery.models import FallbackPolicy
from menu_delivery.services.geo import get_geocoding_service

from tests.conftest import FakeGeocoder, InMemoryConfigResolver, SAO_PAULO


@pytest.fixture
def api(strict_config, fake_geocoder):
    """TestClient wired to in-memory tenants and a fake geocoder."""
    resolver = InMemoryConfigResolver(
        strict_config,
        dataclasses.replace(strict_config, slug="closed-kitchen", delivery_enabled=False),
        dataclasses.replace(strict_config, slug="no-rate", per_kilometer_rate=None),
        dataclasses.replace(
            strict_config,
            slug="flat-lenient",
            per_kilometer_rate=None,
            fallback_policy=FallbackPolicy.LENIENT,
        ),
    )
    app.dependency_overrides[get_config_resolver] = lambda: resolver
    app.dependency_overrides[get_geocoding_service] = lambda: fake_geocoder
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_distance_quote(api):
    response = api.get("/menu/pizzaria-paulista/calculate-delivery", params={"cep": "20040020"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"fee", "estimatedMinutes", "cep", "distanceKm", "perKm"}
    assert body["cep"] == "20040-020"
    assert body["estimatedMinutes"] == 40
    assert body["perKm"] == 2.0
    assert body["fee"] == pytest.approx(body["distanceKm"] * 2.0, abs=0.02)


def test_formatted_cep_and_mixed_case_slug(api):
    response = api.get("/menu/Pizzaria-Paulista/calculate-delivery", params={"cep": " 20040-020 "})

    assert response.status_code == 200
    assert response.json()["cep"] == "20040-020"


@pytest.mark.parametrize("params", [{}, {"cep": "1234"}, {"cep": "2004002011"}])
def test_invalid_cep_is_400(api, params):
    response = api.get("/menu/pizzaria-paulista/calculate-delivery", params=params)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Invalid CEP. Please enter 8 digits.",
        "detail": "invalid_postal_code",
    }


@pytest.mark.parametrize("slug", ["unknown-place", "closed-kitchen"])
def test_unavailable_delivery_is_404(api, slug):
    response = api.get(f"/menu/{slug}/calculate-delivery", params={"cep": "20040020"})

    assert response.status_code == 404
    assert response.json()["detail"] == "delivery_unavailable"


def test_missing_rate_is_400_configuration_error(api):
    response = api.get("/menu/no-rate/calculate-delivery", params={"cep": "20040020"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["detail"] == "delivery_misconfigured"


def test_lenient_tenant_gets_flat_fee_without_distance(api):
    response = api.get("/menu/flat-lenient/calculate-delivery", params={"cep": "20040020"})

    assert response.status_code == 200
    body = response.json()
    assert body == {"fee": 8.0, "estimatedMinutes": 40, "cep": "20040-020"}


def test_unresolvable_cep_is_422(api):
    app.dependency_overrides[get_geocoding_service] = lambda: FakeGeocoder({"01310100": SAO_PAULO})

    response = api.get("/menu/pizzaria-paulista/calculate-delivery", params={"cep": "99999999"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["detail"] == "coordinates_unavailable"
    assert body["error"]


def test_root(api):
    response = api.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"
