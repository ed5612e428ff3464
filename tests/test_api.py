from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from ipmatcher.api.main import create_app
from ipmatcher.services.matcher import Matcher
from ipmatcher.settings import Settings

pytestmark = [pytest.mark.integration]


@pytest.mark.asyncio
async def test_network_lifecycle(app, admin_headers):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/networks",
                json={"address": "10.0.0.77", "netmask": "255.255.255.0"},
                headers=admin_headers,
            )
            assert r.status_code == 201, r.text

            r = await client.get("/v1/networks")
            assert r.json() == {"networks": ["10.0.0.0/255.255.255.0"]}

            r = await client.get(
                "/v1/networks/exists", params={"address": "10.0.0.0", "netmask": "255.255.255.0"}
            )
            assert r.json() == {"exists": True}

            r = await client.get("/v1/match", params={"address": "10.0.0.9"})
            assert r.json() == {"address": "10.0.0.9", "match": True}

            r = await client.delete("/v1/networks/10.0.0.0", headers=admin_headers)
            assert r.status_code == 200

            r = await client.get("/v1/match", params={"address": "10.0.0.9"})
            assert r.json() == {"address": "10.0.0.9", "match": False}

            r = await client.get("/v1/networks")
            assert r.json() == {"networks": []}


@pytest.mark.asyncio
async def test_invalid_address_returns_400(app, admin_headers):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/v1/match", params={"address": "10.0.0"})
            assert r.status_code == 400
            assert r.json() == {
                "error": "Invalid IPv4 address for address: '10.0.0'",
                "field": "address",
            }

            r = await client.post(
                "/v1/networks",
                json={"address": "10.0.0.0", "netmask": "255.255.0"},
                headers=admin_headers,
            )
            assert r.status_code == 400
            assert r.json()["field"] == "netmask"


@pytest.mark.asyncio
async def test_seed_endpoint_accepts_yaml(app, admin_headers, matcher: Matcher):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/seed",
                content=b"networks:\n  - 10.0.0.0/8\n  - 192.168.0.0/16\n",
                headers={**admin_headers, "content-type": "application/yaml"},
            )
            assert r.status_code == 200, r.text
            assert r.json() == {"ok": "true", "count": 2}

            r = await client.post(
                "/v1/seed",
                content=b"[]",
                headers={**admin_headers, "content-type": "application/json"},
            )
            assert r.status_code == 400

    assert matcher.all() == ["10.0.0.0/255.0.0.0", "192.168.0.0/255.255.0.0"]


@pytest.mark.asyncio
async def test_lifespan_loads_seed_file(tmp_path, settings: Settings):
    seed = tmp_path / "seed.yaml"
    seed.write_text("networks:\n  - address: 198.51.100.0\n    netmask: 255.255.255.0\n")
    payload = settings.model_dump()
    payload.update({"seed_file": str(seed)})
    app = create_app(settings=Settings(**payload))

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/v1/match", params={"address": "198.51.100.23"})
            assert r.json()["match"] is True

            r = await client.get("/readyz")
            assert r.status_code == 200
            assert r.json()["networks"] == 1


@pytest.mark.asyncio
async def test_health_and_metrics(app, admin_headers):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.json() == {"ok": "true"}
            assert r.headers.get("X-Request-ID")

            await client.post(
                "/v1/networks",
                json={"address": "10.0.0.0", "netmask": "255.0.0.0"},
                headers=admin_headers,
            )
            await client.get("/v1/match", params={"address": "10.1.1.1"})
            await client.get("/v1/match", params={"address": "10.1.1.1"})

            r = await client.get("/metrics")

    assert r.status_code == 200
    body = r.text
    assert 'ipmatcher_events_total{event="cache_hit"} 1' in body
    assert 'ipmatcher_events_total{event="network_match"} 1' in body
    assert "ipmatcher_networks 1" in body
    assert "ipmatcher_cache_entries 1" in body
    assert 'route="/v1/match",status_code="200"} 2' in body


@pytest.mark.asyncio
@pytest.mark.security
async def test_mutations_require_admin_key(app):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/networks", json={"address": "10.0.0.0", "netmask": "255.0.0.0"}
            )
            assert r.status_code == 401

            r = await client.delete("/v1/networks/10.0.0.0", headers={"X-Admin-Key": "wrong"})
            assert r.status_code == 401

            r = await client.get("/v1/networks")
            assert r.json() == {"networks": []}


@pytest.mark.asyncio
@pytest.mark.security
async def test_mutations_fail_closed_without_configured_key(settings: Settings, matcher: Matcher):
    payload = settings.model_dump()
    payload.update({"admin_api_key": ""})
    app = create_app(settings=Settings(**payload), matcher=matcher)

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/networks",
                json={"address": "10.0.0.0", "netmask": "255.0.0.0"},
                headers={"X-Admin-Key": ""},
            )

    assert r.status_code == 403
    assert matcher.all() == []


@pytest.mark.asyncio
@pytest.mark.security
async def test_security_headers_and_disabled_docs(app):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/v1/networks")
            docs = await client.get("/docs")

    assert r.headers.get("X-Content-Type-Options") == "nosniff"
    assert r.headers.get("X-Frame-Options") == "DENY"
    assert r.headers.get("Cache-Control") == "no-store"
    assert docs.status_code == 404


@pytest.mark.asyncio
async def test_seed_endpoint_rejects_partially_bad_payload(app, admin_headers, matcher: Matcher):
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/seed",
                json={"networks": ["10.0.0.0/8", "bogus/24"]},
                headers=admin_headers,
            )
            assert r.status_code == 400
            assert r.json()["field"] == "address"

            r = await client.get("/v1/networks")
            assert r.json() == {"networks": []}

    assert matcher.all() == []
