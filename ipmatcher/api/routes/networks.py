from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from ipmatcher.api.deps import get_matcher, require_admin
from ipmatcher.api.schemas import ExistsOut, MatchOut, NetworkIn, NetworksOut, SeedOut
from ipmatcher.core.addresses import canonical_ipv4
from ipmatcher.seed import apply_seed, parse_seed_payload
from ipmatcher.services.matcher import Matcher

router = APIRouter(prefix="/v1")


@router.get("/networks")
async def list_networks(matcher: Matcher = Depends(get_matcher)) -> NetworksOut:
    return NetworksOut(networks=matcher.all())


@router.post(
    "/networks",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def add_network(
    body: NetworkIn,
    matcher: Matcher = Depends(get_matcher),
) -> dict[str, str]:
    """Register a network. Re-adding an existing network succeeds as a no-op."""
    matcher.add(body.address, body.netmask)
    return {"ok": "true"}


@router.get("/networks/exists")
async def network_exists(
    address: str = Query(...),
    netmask: str = Query(...),
    matcher: Matcher = Depends(get_matcher),
) -> ExistsOut:
    return ExistsOut(exists=matcher.exists(address, netmask))


@router.delete("/networks/{address}", dependencies=[Depends(require_admin)])
async def remove_network(
    address: str,
    matcher: Matcher = Depends(get_matcher),
) -> dict[str, str]:
    matcher.remove(address)
    return {"ok": "true"}


@router.get("/match")
async def match_address(
    address: str = Query(...),
    matcher: Matcher = Depends(get_matcher),
) -> MatchOut:
    matched = matcher.match_exists(address)
    return MatchOut(address=canonical_ipv4(address), match=matched)


@router.post("/seed", dependencies=[Depends(require_admin)])
async def seed_networks(
    request: Request,
    matcher: Matcher = Depends(get_matcher),
) -> SeedOut:
    raw = await request.body()
    content_type = request.headers.get("content-type", "application/json").split(";")[0].strip()

    data = parse_seed_payload(content_type, raw)
    return SeedOut(count=apply_seed(matcher, data))
