from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ipmatcher.core.addresses import prefix_to_netmask
from ipmatcher.core.errors import ConfigurationError, ValidationError
from ipmatcher.models import NetworkEntry
from ipmatcher.services.matcher import Matcher

_YAML_TYPES = {
    "application/x-yaml",
    "application/yaml",
    "application/yml",
    "text/yaml",
    "text/x-yaml",
}
_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_seed_payload(content_type: str, raw: bytes) -> dict[str, Any]:
    if content_type in _YAML_TYPES:
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise ValidationError("Invalid YAML seed payload") from exc
    else:
        try:
            data = json.loads(raw or b"{}")
        except json.JSONDecodeError as exc:
            raise ValidationError("Invalid JSON seed payload") from exc

    if not isinstance(data, dict):
        raise ValidationError("Seed payload must be a JSON/YAML object")

    return data


def load_seed_file(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read seed file {path}", details={"path": str(path)}
        ) from exc

    if path.suffix.lower() in _YAML_SUFFIXES:
        content_type = "application/yaml"
    else:
        content_type = "application/json"
    try:
        return parse_seed_payload(content_type, raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Malformed seed file {path}: {exc.message}", details={"path": str(path)}
        ) from exc


def _split_network(item: Any) -> tuple[str, str]:
    if isinstance(item, Mapping):
        try:
            return item["address"], item["netmask"]
        except KeyError as exc:
            raise ValidationError(
                "Seed network needs 'address' and 'netmask'", field=str(exc.args[0])
            ) from exc

    if isinstance(item, str) and "/" in item:
        address, _, mask = item.partition("/")
        mask = mask.strip()
        if mask.isdigit():
            try:
                mask = prefix_to_netmask(int(mask))
            except ValueError as exc:
                raise ValidationError(str(exc), field="netmask") from exc
        return address, mask

    raise ValidationError(f"Unsupported seed network entry: {item!r}", field="networks")


def apply_seed(matcher: Matcher, data: Mapping[str, Any]) -> int:
    """Register every network in ``data["networks"]``.

    The whole list is validated before the first entry is added, so a bad
    entry leaves the matcher unchanged.
    """
    networks = data.get("networks") or []
    if not isinstance(networks, list):
        raise ValidationError("'networks' must be a list", field="networks")

    entries = [NetworkEntry.create(*_split_network(item)) for item in networks]
    for entry in entries:
        matcher.add(entry.address, entry.netmask)
    return len(entries)
