import warnings

import pytest
import respx
from asana_mcp.core.assembler import (
    assemble_project_document,
    assemble_workspace_document,
    shape_custom_field,
)
from asana_mcp.core.client import (
    AsanaClient,
    AsanaHTTPError,
    AsanaNotFoundError,
    PartialAssemblyWarning,
)
from httpx import Response

BASE = "https://mock-asana.com/api/1.0"

PROJECT = {
    "gid": "p1",
    "name": "Roadmap",
    "resource_type": "project",
    "created_at": "2026-01-02T10:00:00.000Z",
    "modified_at": "2026-03-04T10:00:00.000Z",
    "archived": False,
    "public": True,
    "notes": "",
    "color": "light-green",
    "default_view": "board",
    "due_on": None,
    "workspace": {"gid": "ws1", "name": "Acme"},
    "team": None,
}


@pytest.fixture
def client():
    return AsanaClient(access_token="mock-token", base_url=BASE)


def test_shape_enum_custom_field_keeps_enabled_options():
    shaped = shape_custom_field(
        {
            "gid": "1",
            "name": "Priority",
            "resource_type": "custom_field",
            "type": "enum",
            "enum_options": [
                {"gid": "o1", "name": "High", "enabled": True},
                {"gid": "o2", "name": "Low", "enabled": False},
            ],
        }
    )

    assert shaped == {
        "gid": "1",
        "name": "Priority",
        "type": "custom_field",
        "field_type": "enum",
        "description": None,
        "enum_options": [{"gid": "o1", "name": "High"}],
    }


def test_shape_number_custom_field_defaults_precision():
    shaped = shape_custom_field({"gid": "2", "name": "Points", "type": "number"})

    assert shaped["precision"] == 0
    assert "enum_options" not in shaped


def test_shape_text_custom_field_has_no_extras():
    shaped = shape_custom_field({"gid": "3", "name": "Ref", "type": "text"})

    assert set(shaped) == {"gid", "name", "type", "field_type", "description"}


def test_shape_missing_custom_field_is_skipped():
    assert shape_custom_field(None) is None
    assert shape_custom_field({}) is None


@pytest.mark.asyncio
@respx.mock
async def test_project_document_merges_all_fetches(client):
    respx.get(f"{BASE}/projects/p1").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    respx.get(f"{BASE}/projects/p1/sections").mock(
        return_value=Response(
            200,
            json={"data": [{"gid": "s1", "name": "Backlog", "created_at": "2026-01-02"}]},
        )
    )
    respx.get(f"{BASE}/projects/p1/custom_field_settings").mock(
        return_value=Response(
            200,
            json={
                "data": [
                    {"gid": "cfs1", "custom_field": {"gid": "cf1", "type": "number", "precision": 2}},
                    {"gid": "cfs2"},
                ]
            },
        )
    )

    async with client:
        doc = await assemble_project_document(client, "p1")

    assert doc["id"] == "p1"
    assert doc["name"] == "Roadmap"
    assert doc["notes"] is None
    assert doc["public"] is True
    assert doc["archived"] is False
    assert doc["workspace"] == {"gid": "ws1", "name": "Acme"}
    assert doc["team"] is None
    assert doc["sections"] == [
        {"gid": "s1", "name": "Backlog", "created_at": "2026-01-02"}
    ]
    assert [cf["gid"] for cf in doc["custom_fields"]] == ["cf1"]
    assert doc["custom_fields"][0]["precision"] == 2


@pytest.mark.asyncio
@respx.mock
async def test_failed_sections_degrade_to_empty_list(client, caplog):
    respx.get(f"{BASE}/projects/p1").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    respx.get(f"{BASE}/projects/p1/sections").mock(
        return_value=Response(403, json={"errors": [{"message": "Forbidden"}]})
    )
    respx.get(f"{BASE}/projects/p1/custom_field_settings").mock(
        return_value=Response(200, json={"data": []})
    )

    caplog.set_level("WARNING", logger="asana_mcp.observability")
    async with client:
        with pytest.warns(PartialAssemblyWarning, match="sections"):
            doc = await assemble_project_document(client, "p1")

    assert doc["sections"] == []
    assert doc["custom_fields"] == []
    assert doc["name"] == "Roadmap"
    record = next(r for r in caplog.records if r.getMessage() == "partial_assembly")
    assert record.fetch == "sections"
    assert record.entity_gid == "p1"


@pytest.mark.asyncio
@respx.mock
async def test_primary_fetch_failure_propagates(client):
    respx.get(f"{BASE}/projects/p1").mock(
        return_value=Response(404, json={"errors": [{"message": "Unknown object"}]})
    )
    sections = respx.get(f"{BASE}/projects/p1/sections")

    async with client:
        with pytest.raises(AsanaNotFoundError):
            await assemble_project_document(client, "p1")

    assert not sections.called


@pytest.mark.asyncio
@respx.mock
async def test_workspace_document(client):
    respx.get(f"{BASE}/workspaces").mock(
        return_value=Response(
            200,
            json={
                "data": [
                    {"gid": "ws0", "name": "Other"},
                    {
                        "gid": "ws1",
                        "name": "Acme",
                        "resource_type": "workspace",
                        "is_organization": True,
                        "email_domains": ["acme.test"],
                    },
                ]
            },
        )
    )

    async with client:
        doc = await assemble_workspace_document(client, "ws1")

    assert doc == {
        "name": "Acme",
        "id": "ws1",
        "type": "workspace",
        "is_organization": True,
        "email_domains": ["acme.test"],
    }


@pytest.mark.asyncio
@respx.mock
async def test_workspace_document_not_found(client):
    respx.get(f"{BASE}/workspaces").mock(
        return_value=Response(200, json={"data": [{"gid": "ws0", "name": "Other"}]})
    )

    async with client:
        with pytest.raises(AsanaHTTPError) as exc:
            await assemble_workspace_document(client, "ws1")

    assert exc.value.status_code == 404
    assert "Workspace not found: ws1" in str(exc.value)


def test_shape_multi_enum_custom_field():
    shaped = shape_custom_field(
        {
            "gid": "4",
            "name": "Labels",
            "type": "multi_enum",
            "enum_options": [
                {"gid": "o1", "name": "Bug"},
                {"gid": "o2", "name": "Old", "enabled": False},
                {"gid": "o3", "name": "Feature", "enabled": True},
            ],
        }
    )

    assert shaped["field_type"] == "multi_enum"
    assert shaped["enum_options"] == [
        {"gid": "o1", "name": "Bug"},
        {"gid": "o3", "name": "Feature"},
    ]


def test_shape_number_custom_field_null_precision_is_zero():
    shaped = shape_custom_field(
        {"gid": "5", "name": "Estimate", "type": "number", "precision": None}
    )

    assert shaped["precision"] == 0


@pytest.mark.asyncio
@respx.mock
async def test_failed_custom_fields_degrade_independently(client):
    respx.get(f"{BASE}/projects/p1").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    respx.get(f"{BASE}/projects/p1/sections").mock(
        return_value=Response(
            200, json={"data": [{"gid": "s1", "name": "Backlog"}]}
        )
    )
    respx.get(f"{BASE}/projects/p1/custom_field_settings").mock(
        return_value=Response(403, json={"errors": [{"message": "Forbidden"}]})
    )

    async with client:
        with pytest.warns(PartialAssemblyWarning, match="custom_fields"):
            doc = await assemble_project_document(client, "p1")

    assert doc["custom_fields"] == []
    assert doc["sections"] == [{"gid": "s1", "name": "Backlog", "created_at": None}]


@pytest.mark.asyncio
@respx.mock
async def test_partial_failure_survives_warnings_as_errors(client, caplog):
    respx.get(f"{BASE}/projects/p1").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    respx.get(f"{BASE}/projects/p1/sections").mock(
        return_value=Response(500, json={"errors": [{"message": "Server Error"}]})
    )
    respx.get(f"{BASE}/projects/p1/custom_field_settings").mock(
        return_value=Response(200, json={"data": []})
    )

    caplog.set_level("WARNING", logger="asana_mcp.observability")
    async with client:
        with warnings.catch_warnings():
            warnings.simplefilter("error", PartialAssemblyWarning)
            doc = await assemble_project_document(client, "p1")

    assert doc["sections"] == []
    assert doc["name"] == "Roadmap"
    assert any(r.getMessage() == "partial_assembly" for r in caplog.records)
