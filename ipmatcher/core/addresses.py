from __future__ import annotations

import ipaddress
from typing import Any

from ipmatcher.core.errors import InvalidAddressError


def parse_ipv4(value: Any, field: str = "address") -> ipaddress.IPv4Address:
    if not isinstance(value, str) or not value.strip():
        raise InvalidAddressError(value, field=field)
    try:
        return ipaddress.IPv4Address(value.strip())
    except ValueError as exc:
        raise InvalidAddressError(value, field=field) from exc


def canonical_ipv4(value: Any, field: str = "address") -> str:
    return str(parse_ipv4(value, field=field))


def prefix_to_netmask(prefix: int) -> str:
    if not 0 <= prefix <= 32:
        raise ValueError(f"Invalid IPv4 prefix length: {prefix}")
    return str(ipaddress.IPv4Network(f"0.0.0.0/{prefix}").netmask)
