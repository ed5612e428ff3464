from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass, field

from ipmatcher.constants import HOST_NETMASK
from ipmatcher.core.addresses import parse_ipv4
from ipmatcher.core.netmask import apply_subnet_mask


class EntryOutcome(enum.StrEnum):
    MATCH = "match"
    NO_MATCH = "no_match"
    INVALID_MASK = "invalid_mask"


@dataclass(frozen=True)
class NetworkEntry:
    """A registered network, identified by its (address, netmask) pair.

    ``address`` is the network base: host bits are zeroed against
    ``netmask`` when the entry is built through :meth:`create`. An entry with
    a non-contiguous netmask keeps its address as given and never matches.
    """

    address: str
    netmask: str
    packed_address: bytes = field(repr=False, compare=False)
    packed_netmask: bytes = field(repr=False, compare=False)

    @classmethod
    def create(cls, address: str, netmask: str) -> NetworkEntry:
        parsed_address = parse_ipv4(address, field="address")
        parsed_netmask = parse_ipv4(netmask, field="netmask")

        mask_bytes = parsed_netmask.packed
        base = apply_subnet_mask(parsed_address.packed, mask_bytes)
        if base is None:
            base = parsed_address.packed

        return cls(
            address=str(ipaddress.IPv4Address(base)),
            netmask=str(parsed_netmask),
            packed_address=base,
            packed_netmask=mask_bytes,
        )

    @property
    def is_host(self) -> bool:
        return self.netmask == HOST_NETMASK

    def test(self, query: bytes) -> EntryOutcome:
        """Check whether the packed ``query`` address lies in this network."""
        masked = apply_subnet_mask(query, self.packed_netmask)
        if masked is None:
            return EntryOutcome.INVALID_MASK
        if masked == self.packed_address:
            return EntryOutcome.MATCH
        return EntryOutcome.NO_MATCH

    def __str__(self) -> str:
        return f"{self.address}/{self.netmask}"
