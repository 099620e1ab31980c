"""Tests for web API endpoints."""

from unittest.mock import patch

from fastapi.testclient import TestClient
import pytest

from fusehelper import __version__
from fusehelper.application.fusion_service import FuseApplicationService
from fusehelper.data.dataset import DatasetError
from fusehelper.web.main import app


client = TestClient(app)


@pytest.fixture
def container(forge_database):
    mock_container = type(
        "Container",
        (),
        {"database": forge_database, "fuse": FuseApplicationService(database=forge_database)},
    )()
    with patch("fusehelper.web.routers.items.get_container", return_value=mock_container), \
            patch("fusehelper.web.routers.fusion.get_container", return_value=mock_container):
        yield mock_container


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_endpoint():
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "fusehelper"
    assert data["status"] == "ok"
    assert data["version"] == __version__


def test_search_endpoint(container):
    response = client.get("/items/search?q=axe%20rank%205")
    assert response.status_code == 200
    data = response.json()
    assert data["requested_rank"] == 5
    assert data["type_boost"] == "axe"
    assert [s["item"]["name"] for s in data["suggestions"]] == ["Battle Axe", "Iron Axe"]


def test_search_endpoint_rejects_bad_limit(container):
    response = client.get("/items/search?q=ingot&limit=0")
    assert response.status_code == 400


def test_detail_endpoint(container):
    response = client.get("/items/detail?name=Flame%20Sword")
    assert response.status_code == 200
    assert response.json()["recipes"][0]["ingredients"] == ["Iron Sword (R3)", "Fire Stone (R3)"]


def test_detail_endpoint_not_found(container):
    response = client.get("/items/detail?name=qqqq")
    assert response.status_code == 404


def test_fusion_endpoint(container):
    response = client.get("/fusion?item=Flame%20Sword&store=3")
    assert response.status_code == 200
    data = response.json()
    assert data["item"]["name"] == "Flame Sword"
    assert data["totals"]["total_price"] == 100
    assert [row["name"] for row in data["totals"]["rows"]] == ["Ingot", "Fire Stone"]


def test_fusion_endpoint_bad_store(container):
    response = client.get("/fusion?item=Flame%20Sword&store=9")
    assert response.status_code == 400


def test_fusion_endpoint_not_found(container):
    response = client.get("/fusion?item=qqqq")
    assert response.status_code == 404
    detail = response.json()["detail"]
    assert detail["found"] is False
    assert len(detail["search"]["suggestions"]) == 5


def test_startup_loads_catalog(forge_database):
    mock_container = type("Container", (), {"database": forge_database})()
    with patch("fusehelper.web.main.get_container", return_value=mock_container):
        with TestClient(app) as started:
            assert started.get("/health").status_code == 200


def test_startup_fails_without_catalog():
    class BrokenDatabase:
        def ensure_loaded(self):
            raise DatasetError("Data file not found: tried nowhere")

    mock_container = type("Container", (), {"database": BrokenDatabase()})()
    with patch("fusehelper.web.main.get_container", return_value=mock_container):
        with pytest.raises(DatasetError):
            with TestClient(app):
                pass
