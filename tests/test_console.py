from __future__ import annotations

import io

import pytest

from ipmatcher import console
from ipmatcher.console import PROMPT, run_console
from ipmatcher.services.matcher import Matcher

pytestmark = [pytest.mark.unit]


def _run(matcher: Matcher, *lines: str) -> str:
    stdout = io.StringIO()
    run_console(matcher, io.StringIO("".join(f"{line}\n" for line in lines)), stdout)
    return stdout.getvalue().replace(PROMPT, "")


def test_console_session(matcher: Matcher):
    output = _run(
        matcher,
        "all",
        "ADD 192.168.1.0 255.255.255.0",
        "add 10.0.0.5 255.255.255.255",
        "all",
        "exists 192.168.1.0 255.255.255.0",
        "exists 192.168.2.0 255.255.255.0",
        "match 192.168.1.36",
        "match 10.0.0.6",
        "del 192.168.1.0",
        "match 192.168.1.36",
        "q",
        "all",
    )

    assert output.splitlines() == [
        "(none)",
        "  192.168.1.0/255.255.255.0",
        "  10.0.0.5/255.255.255.255",
        "192.168.1.0 255.255.255.0 exists",
        "192.168.2.0 255.255.255.0 does not exist",
        "192.168.1.36 matches",
        "10.0.0.6 does not match",
        "192.168.1.36 does not match",
    ]


def test_console_reports_invalid_addresses_and_continues(matcher: Matcher):
    output = _run(matcher, "match 999.1.1.1", "add 10.0.0.0 255.0.0.0", "match 10.9.9.9")

    assert "error: Invalid IPv4 address for address: '999.1.1.1'" in output
    assert "10.9.9.9 matches" in output


def test_console_ignores_unknown_commands_and_bad_arity(matcher: Matcher):
    output = _run(matcher, "frobnicate", "add 10.0.0.0", "match", "", "all")

    assert output.strip() == "(none)"


def test_console_prints_menu(matcher: Matcher):
    output = _run(matcher, "?")

    assert "add <network> <netmask>" in output
    assert "match <address>" in output


def test_console_stops_at_end_of_input(matcher: Matcher):
    stdout = io.StringIO()
    run_console(matcher, io.StringIO("add 10.0.0.0 255.0.0.0"), stdout)

    assert matcher.all() == ["10.0.0.0/255.0.0.0"]


def test_main_seeds_and_runs_console(tmp_path, monkeypatch, capsys):
    seed = tmp_path / "seed.yaml"
    seed.write_text("networks:\n  - 10.0.0.0/8\n")
    monkeypatch.setattr(console, "configure_logging", lambda **kwargs: None)
    monkeypatch.setattr("sys.stdin", io.StringIO("all\nmatch 10.1.2.3\nq\n"))

    assert console.main(["--seed-file", str(seed)]) == 0

    out = capsys.readouterr().out
    assert "  10.0.0.0/255.0.0.0" in out
    assert "10.1.2.3 matches" in out


def test_main_verbose_echoes_matcher_log(monkeypatch, capsys):
    monkeypatch.setattr(console, "configure_logging", lambda **kwargs: None)
    monkeypatch.setattr("sys.stdin", io.StringIO("add 10.0.0.0 255.0.0.0\nq\n"))

    assert console.main(["--verbose"]) == 0

    assert "10.0.0.0 255.0.0.0 added" in capsys.readouterr().out


def test_main_fails_on_missing_seed_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(console, "configure_logging", lambda **kwargs: None)

    assert console.main(["--seed-file", str(tmp_path / "nope.yaml")]) == 1
    assert "Cannot read seed file" in capsys.readouterr().err
