import sys
from pathlib import Path

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.exceptions import (
    BadRequestError,
    SchemaValidationError,
    UnprocessableEntityError,
    error_for_outcome,
)
from api.main import app, get_schema_registry
from api.middleware import validate_payload
from src.payload_validation import Outcome, ValidationOutcome, Violation
from src.payload_validation.registry import SchemaRegistry

USER_SCHEMA = {
    "name": {"type": "string", "required": True},
    "age": {"type": "number"},
    "address": {"street": "string", "zipcode": {"type": "string", "required": True}},
}


@pytest.fixture
def route_client():
    service = FastAPI()

    @service.post("/users")
    async def create_user(payload: dict = Depends(validate_payload(USER_SCHEMA))):
        return {"created": payload["name"]}

    @service.post("/broken")
    async def broken(payload: dict = Depends(validate_payload({"name": {"type": "uuid"}}))):
        return payload

    return TestClient(service)


@pytest.fixture
def registry():
    registry = SchemaRegistry()
    registry.register("user", USER_SCHEMA)
    registry.register("broken", {"name": "nonsense"})
    return registry


@pytest.fixture
def client(registry):
    async def _override():
        return registry

    app.dependency_overrides[get_schema_registry] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_error_for_outcome_maps_each_failure_kind():
    violations = [Violation("name", "must have required property 'name'")]

    assert error_for_outcome(ValidationOutcome(Outcome.ACCEPTED)) is None
    assert isinstance(error_for_outcome(ValidationOutcome(Outcome.BAD_REQUEST)), BadRequestError)
    assert isinstance(
        error_for_outcome(ValidationOutcome(Outcome.INVALID_SCHEMA)), SchemaValidationError
    )
    error = error_for_outcome(ValidationOutcome(Outcome.REJECTED, violations))
    assert isinstance(error, UnprocessableEntityError)
    assert error.to_http_exception().status_code == 422
    assert error.detail["errors"] == [
        {"path": "name", "message": "must have required property 'name'"}
    ]


def test_dependency_passes_valid_payload(route_client):
    response = route_client.post("/users", json={"name": "Ada", "age": 36})

    assert response.status_code == 200
    assert response.json() == {"created": "Ada"}


def test_dependency_rejects_empty_payload(route_client):
    assert route_client.post("/users", json={}).status_code == 400
    assert route_client.post("/users").status_code == 400
    response = route_client.post(
        "/users", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Bad request"}


def test_dependency_rejects_oversized_integer_as_bad_request(route_client):
    body = b'{"name": "Ada", "age": ' + b"1" * 5000 + b"}"

    response = route_client.post(
        "/users", content=body, headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad request"}


def test_dependency_reports_all_violations(route_client):
    response = route_client.post(
        "/users", json={"age": "5", "address": {"street": 1}, "extra": True}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == [
        {"path": "name", "message": "must have required property 'name'"},
        {"path": "age", "message": "'age' must be of type 'number', received 'string'"},
        {
            "path": "address.street",
            "message": "'address.street' must be of type 'string', received 'number'",
        },
        {"path": "address.zipcode", "message": "must have required property 'zipcode'"},
        {"path": "extra", "message": "must NOT have additional properties"},
    ]


def test_dependency_reports_malformed_schema(route_client):
    response = route_client.post("/broken", json={"name": "x"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Invalid schema definition"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_schemas(client):
    response = client.get("/schemas")

    assert response.status_code == 200
    body = {entry["name"]: entry for entry in response.json()}
    assert body["user"]["valid"] is True
    assert body["broken"]["valid"] is False
    assert body["broken"]["errors"] == ["name: cannot determine field type from 'nonsense'"]


def test_get_schema_describes_rules(client):
    response = client.get("/schemas/user")

    assert response.status_code == 200
    rules = response.json()["rules"]
    assert rules["name"] == {"type": "string", "required": True}
    assert rules["address"]["properties"]["zipcode"] == {"type": "string", "required": True}


def test_unknown_schema_is_404(client):
    assert client.get("/schemas/missing").status_code == 404
    assert client.post("/schemas/missing/validate", json={"a": 1}).status_code == 404


def test_validate_endpoint_outcomes(client):
    accepted = client.post(
        "/schemas/user/validate",
        json={"name": "Ada", "address": {"zipcode": "12345"}},
    )
    assert accepted.status_code == 200
    assert accepted.json()["schema_name"] == "user"
    assert accepted.json()["valid"] is True

    assert client.post("/schemas/user/validate", json={}).status_code == 400

    rejected = client.post("/schemas/user/validate", json={"name": 1})
    assert rejected.status_code == 422
    assert rejected.json()["detail"]["errors"] == [
        {"path": "name", "message": "'name' must be of type 'string', received 'number'"}
    ]

    assert client.post("/schemas/broken/validate", json={"name": "x"}).status_code == 500


def test_startup_loads_bundled_schemas():
    with TestClient(app) as client:
        names = [entry["name"] for entry in client.get("/schemas").json()]
        response = client.post(
            "/schemas/order/validate",
            json={
                "customer_id": "507f1f77bcf86cd799439011",
                "placed_at": "2024-05-01T12:30:00Z",
                "items": ["507f1f77bcf86cd799439012", "bad"],
                "total": 19.99,
            },
        )

    assert {"order", "user"} <= set(names)
    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == [
        {
            "path": "items",
            "message": "each item in 'items' must be of type 'ObjectId', received 'string'",
        }
    ]
