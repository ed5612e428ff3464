"""Shared constants for the IP matcher."""

# Netmask of an exact-host route
HOST_NETMASK = "255.255.255.255"

# Cache invalidation policies applied on remove
CACHE_INVALIDATION_FULL = "full"
CACHE_INVALIDATION_ADDRESS = "address"

# Event names
EVENT_NETWORK_ADDED = "network_added"
EVENT_NETWORK_DUPLICATE = "network_duplicate"
EVENT_NETWORK_REMOVED = "network_removed"
EVENT_CACHE_HIT = "cache_hit"
EVENT_CACHE_ADD = "cache_add"
EVENT_CACHE_CLEARED = "cache_cleared"
EVENT_HOST_MATCH = "host_match"
EVENT_NETWORK_MATCH = "network_match"
EVENT_NO_MATCH = "no_match"
