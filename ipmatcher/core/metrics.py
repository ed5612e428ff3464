from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ipmatcher.services.matcher import Matcher

_lock = Lock()
_http_requests_total: Counter[tuple[str, str, str]] = Counter()
_http_request_duration_ms_total: Counter[tuple[str, str, str]] = Counter()
_events_total: Counter[str] = Counter()


def record_http_request(*, method: str, route: str, status_code: int, duration_ms: int) -> None:
    key = (method.upper(), route, str(status_code))
    with _lock:
        _http_requests_total[key] += 1
        _http_request_duration_ms_total[key] += max(0, int(duration_ms))


def record_event(event: str) -> None:
    with _lock:
        _events_total[event] += 1


def event_count(event: str) -> int:
    with _lock:
        return _events_total[event]


def reset_metrics() -> None:
    with _lock:
        _http_requests_total.clear()
        _http_request_duration_ms_total.clear()
        _events_total.clear()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _http_labels(method: str, route: str, status_code: str) -> str:
    return (
        f'method="{_escape(method)}",route="{_escape(route)}",status_code="{_escape(status_code)}"'
    )


def render_prometheus_metrics(matcher: Matcher) -> str:
    lines: list[str] = []

    with _lock:
        http_requests_snapshot = dict(_http_requests_total)
        http_duration_snapshot = dict(_http_request_duration_ms_total)
        events_snapshot = dict(_events_total)

    lines.append("# HELP ipmatcher_http_requests_total Total number of HTTP requests.")
    lines.append("# TYPE ipmatcher_http_requests_total counter")
    for (method, route, status_code), value in sorted(http_requests_snapshot.items()):
        labels = _http_labels(method, route, status_code)
        lines.append(f"ipmatcher_http_requests_total{{{labels}}} {value}")

    lines.append(
        "# HELP ipmatcher_http_request_duration_ms_total Total request duration in milliseconds."
    )
    lines.append("# TYPE ipmatcher_http_request_duration_ms_total counter")
    for (method, route, status_code), value in sorted(http_duration_snapshot.items()):
        labels = _http_labels(method, route, status_code)
        lines.append(f"ipmatcher_http_request_duration_ms_total{{{labels}}} {value}")

    lines.append("# HELP ipmatcher_events_total Total number of matcher events.")
    lines.append("# TYPE ipmatcher_events_total counter")
    for event, value in sorted(events_snapshot.items()):
        lines.append(f'ipmatcher_events_total{{event="{_escape(event)}"}} {value}')

    lines.append("# HELP ipmatcher_networks Number of registered networks.")
    lines.append("# TYPE ipmatcher_networks gauge")
    lines.append(f"ipmatcher_networks {len(matcher.registry)}")

    lines.append("# HELP ipmatcher_cache_entries Number of cached positive match results.")
    lines.append("# TYPE ipmatcher_cache_entries gauge")
    lines.append(f"ipmatcher_cache_entries {len(matcher.cache)}")

    lines.append("")
    return "\n".join(lines)
