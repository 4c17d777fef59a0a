"""Tests for colored output and log tags."""

from islandworld.logging_utils import (
    Color,
    LOG_TAG_AGENT,
    LOG_TAG_GENERATION,
    colored,
    log_agent_debug,
    log_generation,
)


def test_colored_respects_no_color(monkeypatch):
    monkeypatch.delenv("ISLANDWORLD_NO_COLOR", raising=False)
    assert colored("hi", Color.RED) == f"{Color.RED.value}hi{Color.RESET.value}"
    assert colored("hi", Color.GREEN, bold=True) == (
        f"{Color.BOLD.value}{Color.GREEN.value}hi{Color.RESET.value}"
    )

    monkeypatch.setenv("ISLANDWORLD_NO_COLOR", "1")
    assert colored("hi", Color.RED, bold=True) == "hi"


def test_generation_log_has_tag(monkeypatch, capsys):
    monkeypatch.setenv("ISLANDWORLD_NO_COLOR", "1")

    log_generation("[Terrain] done")

    assert capsys.readouterr().out == f"{LOG_TAG_GENERATION} [Terrain] done\n"


def test_agent_debug_only_when_verbose(monkeypatch, capsys):
    monkeypatch.setenv("ISLANDWORLD_NO_COLOR", "1")
    monkeypatch.delenv("ISLANDWORLD_VERBOSE", raising=False)

    log_agent_debug("quiet")
    assert capsys.readouterr().out == ""

    monkeypatch.setenv("ISLANDWORLD_VERBOSE", "true")
    log_agent_debug("loud")
    assert capsys.readouterr().out == f"{LOG_TAG_AGENT} loud\n"
