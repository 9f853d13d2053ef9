import json

import pytest
import respx
from asana_mcp.core.client import AsanaClient, AsanaValidationError
from asana_mcp.core.tools.stories import create_task_story, get_task_stories
from asana_mcp.core.tools.tags import get_tags_for_workspace, get_tasks_for_tag
from httpx import Response

BASE = "https://mock-asana.com/api/1.0"


@pytest.fixture
def client():
    return AsanaClient(access_token="mock-token", base_url=BASE)


@pytest.mark.asyncio
@respx.mock
async def test_get_task_stories(client):
    respx.get(f"{BASE}/tasks/t1/stories").mock(
        return_value=Response(
            200,
            json={"data": [{"gid": "s1", "type": "comment", "text": "LGTM"}]},
        )
    )

    async with client:
        result = await get_task_stories(client, "t1")

    assert result[0]["text"] == "LGTM"


@pytest.mark.asyncio
@respx.mock
async def test_create_task_story(client):
    route = respx.post(f"{BASE}/tasks/t1/stories").mock(
        return_value=Response(201, json={"data": {"gid": "s2", "text": "Done"}})
    )

    async with client:
        result = await create_task_story(client, "t1", "Done")

    assert result == {"gid": "s2", "text": "Done"}
    assert json.loads(route.calls[0].request.content) == {"data": {"text": "Done"}}


@pytest.mark.asyncio
async def test_create_task_story_rejects_blank_text(client):
    async with client:
        with pytest.raises(AsanaValidationError):
            await create_task_story(client, "t1", "   ")


@pytest.mark.asyncio
@respx.mock
async def test_tag_lookups(client):
    tasks_route = respx.get(f"{BASE}/tags/tg1/tasks").mock(
        return_value=Response(200, json={"data": [{"gid": "t1"}]})
    )
    respx.get(f"{BASE}/workspaces/ws1/tags").mock(
        return_value=Response(200, json={"data": [{"gid": "tg1", "name": "urgent"}]})
    )

    async with client:
        tasks = await get_tasks_for_tag(client, "tg1", opt_fields="name")
        tags = await get_tags_for_workspace(client, "ws1")

    assert tasks == [{"gid": "t1"}]
    assert tags == [{"gid": "tg1", "name": "urgent"}]
    assert tasks_route.calls[0].request.url.params["opt_fields"] == "name"
