# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for roster loading and validation."""

import json
import logging
import sys
from pathlib import Path

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from models import PitcherHand, Player
from roster import RosterError, load_roster, parse_roster


def make_entry(**overrides):
    entry = {
        "first_name": "Bryce",
        "last_name": "Harper",
        "LHP": {"avg": 0.268, "obp": 0.352, "slug": 0.470},
        "RHP": {"avg": 0.291, "obp": 0.389, "slug": 0.542},
    }
    entry.update(overrides)
    return entry


def test_load_sample_roster():
    roster = load_roster()
    assert len(roster) == 10
    assert all(isinstance(p, Player) for p in roster)
    assert roster[0].last_name == "Chen"
    assert roster[0].RHP.obp == 0.366


def test_load_from_file(tmp_path):
    path = tmp_path / "team.json"
    path.write_text(json.dumps([make_entry(), make_entry(first_name="Trea", last_name="Turner")]))
    roster = load_roster(path)
    assert [p.last_name for p in roster] == ["Harper", "Turner"]
    assert roster[0].split(PitcherHand.LEFT).slug == 0.470
    assert roster[0].split("right").slug == 0.542


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_roster(tmp_path / "nope.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[{not json")
    with pytest.raises(RosterError) as exc_info:
        load_roster(path)
    assert "not valid JSON" in str(exc_info.value)


def test_not_a_list():
    with pytest.raises(RosterError) as exc_info:
        parse_roster({"players": []})
    assert "JSON array" in str(exc_info.value)


class TestValidation:

    def test_out_of_range_stat(self):
        bad = make_entry(LHP={"avg": 1.5, "obp": 0.3, "slug": 0.4})
        with pytest.raises(RosterError) as exc_info:
            parse_roster([make_entry(), bad])
        details = exc_info.value.details
        assert len(details) == 1
        assert details[0].startswith("1.LHP.avg")

    def test_missing_fields(self):
        with pytest.raises(RosterError) as exc_info:
            parse_roster([{"first_name": "Only"}])
        joined = "\n".join(exc_info.value.details)
        assert "last_name" in joined
        assert "LHP" in joined
        assert "RHP" in joined

    def test_avg_above_obp_warns(self, caplog):
        odd = make_entry(RHP={"avg": 0.300, "obp": 0.280, "slug": 0.450})
        with caplog.at_level(logging.WARNING, logger="roster"):
            roster = parse_roster([odd])
        assert len(roster) == 1
        assert any("AVG 0.300 above OBP 0.280" in r.getMessage() for r in caplog.records)


def test_players_are_immutable():
    player = parse_roster([make_entry()])[0]
    with pytest.raises(Exception):
        player.last_name = "Other"
