import json

import httpx

from geofeed.clients.profile_client import ProfileClient


async def _client(handler) -> ProfileClient:
    client = ProfileClient(base_url="http://auth.test/api", timeout=0.5)
    await client.start(transport=httpx.MockTransport(handler))
    return client


async def test_batch_lookup_sends_distinct_ids():
    sent = {}

    def handler(request: httpx.Request) -> httpx.Response:
        sent["path"] = request.url.path
        sent["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"profiles": [{"userId": "alice", "name": "Alice Chen"}, None]},
        )

    client = await _client(handler)
    profiles = await client.fetch_profiles(["alice", "bob", "alice"])
    await client.stop()

    assert sent == {"path": "/api/profiles/batch", "body": {"userIds": ["alice", "bob"]}}
    assert list(profiles) == ["alice"]
    assert profiles["alice"].name == "Alice Chen"


async def test_no_ids_skips_the_call():
    calls = []
    client = await _client(lambda request: calls.append(request) or httpx.Response(200, json={}))

    assert await client.fetch_profiles([]) == {}
    assert calls == []


async def test_failures_degrade_to_empty_map():
    client = await _client(lambda request: httpx.Response(503))
    assert await client.fetch_profiles(["alice"]) == {}

    client = await _client(lambda request: httpx.Response(200, json=["not", "an", "object"]))
    assert await client.fetch_profiles(["alice"]) == {}

    def unreachable(request):
        raise httpx.ConnectError("down", request=request)

    client = await _client(unreachable)
    assert await client.fetch_profiles(["alice"]) == {}


async def test_duplicate_profiles_keep_first():
    payload = {"profiles": [{"userId": "alice", "name": "First"}, {"userId": "alice", "name": "Second"}]}
    client = await _client(lambda request: httpx.Response(200, json=payload))

    profiles = await client.fetch_profiles(["alice"])

    assert profiles["alice"].name == "First"
