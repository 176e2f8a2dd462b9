"""
Consumer-side contract tests for the task service.

Validates that the assumptions hard-coded into the client (success status
codes, wire field names, enum values) still align with the OpenAPI
contract in ``contracts/task_service_openapi.yaml``.  The tests do **not**
call a live service; they parse the YAML and assert structural invariants
that the client relies on.

Key SDET Concepts Demonstrated:
- Consumer-driven contract testing against an OpenAPI specification
- ``$ref`` resolution for navigating nested schemas
- Enum synchronisation checks between client and contract
- ``pytest.importorskip`` for optional-dependency gating
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import pytest

from todo_client.models import Task, TaskCategory, TaskPriority

yaml = pytest.importorskip("yaml", reason="Install pyyaml for contract tests.")

pytestmark = pytest.mark.contract


@lru_cache(maxsize=1)
def _load_openapi_spec() -> dict[str, Any]:
    path = Path(__file__).resolve().parents[2] / "contracts" / "task_service_openapi.yaml"
    with path.open("r", encoding="utf-8") as contract_file:
        return yaml.safe_load(contract_file)


def _resolve_schema_ref(openapi_spec: dict[str, Any], schema: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve local ``$ref`` references in OpenAPI schemas.

    Raises:
        AssertionError: If the reference is non-local or resolves to a
            non-dict node.
    """
    if "$ref" not in schema:
        return schema

    ref = schema["$ref"]
    if not ref.startswith("#/"):
        raise AssertionError(f"Unexpected non-local schema reference: {ref}")

    node: Any = openapi_spec
    for part in ref[2:].split("/"):
        node = node[part]

    if not isinstance(node, dict):
        raise AssertionError(f"Resolved schema for ref {ref} is not an object")
    return node


def _task_schema(spec: dict[str, Any]) -> dict[str, Any]:
    schema = spec["components"]["schemas"]["Task"]
    if "allOf" in schema:
        merged: dict[str, Any] = {"required": [], "properties": {}}
        for part in schema["allOf"]:
            resolved = _resolve_schema_ref(spec, part)
            merged["required"].extend(resolved.get("required", []))
            merged["properties"].update(resolved.get("properties", {}))
        return merged
    return schema


def test_success_status_codes_match_client_handling():
    """
    Test that each operation declares exactly the success statuses the
    client accepts.

    ``TaskServiceClient`` treats any other status as a failure, so a
    contract that adds or drops one must be reflected in the client.
    """
    # Arrange
    spec = _load_openapi_spec()
    expected = {
        ("/tasks", "get"): {"200"},
        ("/tasks", "post"): {"200", "201"},
        ("/tasks/{id}", "put"): {"200"},
        ("/tasks/{id}", "delete"): {"200", "204"},
    }

    # Act / Assert
    for (path, method), statuses in expected.items():
        responses = spec["paths"][path][method]["responses"]
        assert set(responses.keys()) == statuses, (path, method)


def test_list_response_is_an_array_of_tasks():
    spec = _load_openapi_spec()

    schema = spec["paths"]["/tasks"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]

    assert schema["type"] == "array"
    assert schema["items"] == {"$ref": "#/components/schemas/Task"}


def test_task_fields_match_client_payload():
    """
    Test that the fields the client sends on create are exactly the
    contract's required fields, plus the optional ``dueDate``.
    """
    # Arrange
    spec = _load_openapi_spec()
    task = Task(id="1", text="x", created_at="2025-01-01T00:00:00Z", due_date="2025-01-02T00:00:00Z")

    # Act
    task_schema = _task_schema(spec)
    payload = task.to_dict()

    # Assert
    assert set(task_schema["required"]) == set(payload) - {"dueDate"}
    assert set(task_schema["properties"]) == set(payload)


def test_cleared_due_date_is_allowed_by_contract():
    """Test that the ``null`` due date sent on update is allowed by the contract."""
    spec = _load_openapi_spec()
    task = Task(id="1", text="x", created_at="2025-01-01T00:00:00Z")

    payload = task.to_dict(include_empty=True)

    assert payload["dueDate"] is None
    assert _task_schema(spec)["properties"]["dueDate"].get("nullable") is True


def test_enum_values_are_in_sync():
    spec = _load_openapi_spec()
    schemas = spec["components"]["schemas"]

    assert schemas["Category"]["enum"] == [category.value for category in TaskCategory]
    assert schemas["Priority"]["enum"] == [priority.value for priority in TaskPriority]
