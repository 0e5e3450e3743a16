import pytest
from fastapi.testclient import TestClient

from fastviterbi.api import create_app
from fastviterbi.config import AppConfig, DecodeLimits


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(AppConfig(env="test")))


def test_health_endpoint(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["version"] == "0.1.0"
    assert payload["env"] == "test"


def test_health_endpoint_uses_active_profile(monkeypatch) -> None:
    monkeypatch.delenv("FASTVITERBI_ENV", raising=False)
    client = TestClient(create_app())

    assert client.get("/health").json()["env"] == "dev"


def test_limits_endpoint() -> None:
    config = AppConfig(env="test", limits=DecodeLimits(max_layers=50, max_candidates=4))
    client = TestClient(create_app(config))

    response = client.get("/v1/limits")
    assert response.status_code == 200
    assert response.json() == {"max_layers": 50, "max_candidates": 4}


def test_decode_endpoint(client, scenario_payload) -> None:
    response = client.post("/v1/decode", json=scenario_payload)

    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "viterbi"
    assert payload["node_path"] == [0, 0, 0]
    assert payload["road_path"] == [100, 101, 102]
    assert payload["scores"] == [5.0, 7.0, 10.0]


def test_decode_endpoint_road_anchored(client, scenario_payload) -> None:
    response = client.post(
        "/v1/decode",
        json={**scenario_payload, "target_road_path": [100, 101, 102, 103]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "road_anchored"
    assert payload["node_path"] == [0, 1, 1]
    assert payload["road_path"] == [100, 101, 102, 103]


def test_decode_endpoint_without_consistent_assignment(client, scenario_payload) -> None:
    response = client.post("/v1/decode", json={**scenario_payload, "target_road_path": [100, 102]})

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"] == "NoConsistentAssignmentError"
    assert "no candidate sequence" in payload["detail"]


def test_decode_endpoint_rejects_bad_connector(client, scenario_payload) -> None:
    scenario_payload["connectors"][0]["roads"] = [999]
    response = client.post("/v1/decode", json=scenario_payload)

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"] == "ConnectorTableError"
    assert "head connector" in payload["detail"]


def test_decode_endpoint_rejects_oversized_trellis(scenario_payload) -> None:
    client = TestClient(create_app(AppConfig(env="test", limits=DecodeLimits(max_layers=2))))
    response = client.post("/v1/decode", json=scenario_payload)

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"] == "DecodeTooLargeError"
    assert payload["detail"] == "N = 3 exceeds max_layers = 2"


def test_decode_endpoint_validates_dimensions(client, scenario_payload) -> None:
    response = client.post("/v1/decode", json={**scenario_payload, "K": 0})

    assert response.status_code == 422
