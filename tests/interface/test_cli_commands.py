"""Tests for CLI commands: add, review, due, plan, state and config."""

import json
import logging

import pytest
from typer.testing import CliRunner

from kairos.interface.cli import app

runner = CliRunner()


@pytest.fixture
def deck(mock_home, deck_path):
    return str(deck_path)


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "time-aware SM-2 review scheduler" in result.stdout
    assert "review" in result.stdout
    assert "due" in result.stdout


def test_add_and_review_flow(deck):
    result = runner.invoke(app, ["add", "capital-fr", "--deck", deck])
    assert result.exit_code == 0
    assert "Added 'capital-fr'" in result.stdout

    result = runner.invoke(
        app, ["review", "capital-fr", "4", "--deck", deck, "--at", "2026-10-17T10:30:00"]
    )
    assert result.exit_code == 0
    assert "Some Hesitation" in result.stdout
    assert "Next review in 1 day(s) on 2026-10-18 10:00" in result.stdout
    assert "peak learning state" in result.stdout

    result = runner.invoke(app, ["due", "--deck", deck, "--at", "2026-10-17T12:00:00"])
    assert "No cards due." in result.stdout

    result = runner.invoke(app, ["due", "--deck", deck, "--at", "2026-10-18T10:00:00"])
    assert "Due cards: 1" in result.stdout
    assert "capital-fr" in result.stdout


def test_add_with_plan(deck):
    result = runner.invoke(app, ["add", "c1", "--difficulty", "hard", "--deck", deck])
    assert result.exit_code == 0
    assert "Suggested hard plan (days): 1, 2, 5, 12, 25, 50, 100, 180" in result.stdout


def test_add_with_bad_difficulty_adds_nothing(deck, deck_path):
    result = runner.invoke(app, ["add", "c1", "--difficulty", "brutal", "--deck", deck])
    assert result.exit_code == 1
    assert not deck_path.exists()


def test_add_duplicate(deck):
    runner.invoke(app, ["add", "c1", "--deck", deck])
    result = runner.invoke(app, ["add", "c1", "--deck", deck])
    assert result.exit_code == 1
    assert "already exists" in result.stdout


def test_review_json_output(deck):
    runner.invoke(app, ["add", "c1", "--deck", deck])

    result = runner.invoke(
        app, ["review", "c1", "1", "--deck", deck, "--at", "2026-10-17T14:00:00", "--json"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["card"]["review_count"] == 0
    assert data["card"]["interval_days"] == 1
    assert data["card"]["next_review"].startswith("2026-10-18T10:00:00")
    assert len(data["insights"]) == 2


def test_review_invalid_quality(deck):
    runner.invoke(app, ["add", "c1", "--deck", deck])
    result = runner.invoke(app, ["review", "c1", "9", "--deck", deck])
    assert result.exit_code == 1
    assert "between 0 and 5" in result.stdout


def test_review_unknown_card(deck):
    result = runner.invoke(app, ["review", "ghost", "3", "--deck", deck])
    assert result.exit_code == 1
    assert "Card not found: ghost" in result.stdout


def test_review_bad_timestamp(deck):
    runner.invoke(app, ["add", "c1", "--deck", deck])
    result = runner.invoke(app, ["review", "c1", "3", "--deck", deck, "--at", "soon"])
    assert result.exit_code == 2


def test_due_json_lists_new_cards_first(deck):
    runner.invoke(app, ["add", "a", "--deck", deck])
    runner.invoke(app, ["review", "a", "5", "--deck", deck, "--at", "2026-10-10T12:00:00"])
    runner.invoke(app, ["add", "b", "--deck", deck])

    result = runner.invoke(app, ["due", "--deck", deck, "--at", "2026-10-17T12:00:00", "--json"])

    assert result.exit_code == 0
    assert [c["id"] for c in json.loads(result.stdout)] == ["b", "a"]


def test_plan_command():
    result = runner.invoke(app, ["plan", "easy"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1 3 7 14 30 60 120"

    result = runner.invoke(app, ["plan", "brutal"])
    assert result.exit_code == 1


def test_state_command():
    result = runner.invoke(
        app, ["state", "--hour", "10", "--energy", "high", "--focus", "focused", "--stress", "low"]
    )
    assert result.exit_code == 0
    assert "Learning state: 100/100" in result.stdout
    assert "Excellent state" in result.stdout


def test_state_command_rejects_unknown_level():
    result = runner.invoke(app, ["state", "--hour", "10", "--energy", "turbo"])
    assert result.exit_code == 1


def test_config_show(mock_home):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["preferred_review_hour"] == 10
    assert data["deck_path"].endswith("deck.json")


def test_due_after_utc_review_with_local_time(deck):
    runner.invoke(app, ["add", "a", "--deck", deck])
    runner.invoke(app, ["add", "b", "--deck", deck])
    result = runner.invoke(
        app, ["review", "a", "4", "--deck", deck, "--at", "2026-10-17T10:30:00Z"]
    )
    assert result.exit_code == 0

    result = runner.invoke(app, ["due", "--deck", deck, "--at", "2026-10-20T12:00:00"])
    assert result.exit_code == 0
    assert "Due cards: 2" in result.stdout

    result = runner.invoke(app, ["due", "--deck", deck])
    assert result.exit_code == 0


def test_review_with_corrupt_deck(deck, deck_path):
    deck_path.write_text("{not json")

    result = runner.invoke(app, ["review", "c1", "3", "--deck", deck])

    assert result.exit_code == 1
    assert "not valid JSON" in result.stdout


@pytest.fixture
def kairos_logger():
    logger = logging.getLogger("kairos")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_configured_verbosity_sets_log_level(mock_home, monkeypatch, kairos_logger):
    monkeypatch.setenv("KAIROS_VERBOSE", "0")
    runner.invoke(app, ["plan", "easy"])
    assert kairos_logger.level == logging.WARNING

    runner.invoke(app, ["-v", "plan", "easy"])
    assert kairos_logger.level == logging.INFO


def test_verbose_flags_enable_debug(mock_home, kairos_logger):
    runner.invoke(app, ["-v", "plan", "easy"])
    assert kairos_logger.level == logging.DEBUG

    runner.invoke(app, ["plan", "easy"])
    assert kairos_logger.level == logging.INFO
