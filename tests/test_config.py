"""Tests for settings loading."""

import pytest

from duoledger.config import load_settings, parse_parties
from duoledger.domain.entities import PartyPair
from duoledger.domain.errors import ValidationError


def test_defaults():
    settings = load_settings({})

    assert settings.parties == PartyPair("Burimi", "Skenderi")
    assert settings.shared_marker == "GINGER"
    assert settings.pos_marker == "POS"
    assert settings.database_path is None
    assert settings.log_level == "WARNING"


def test_environment_overrides():
    settings = load_settings(
        {
            "DUOLEDGER_PARTIES": " Ana , Besa ",
            "DUOLEDGER_SHARED_MARKER": "PROJECT",
            "DUOLEDGER_POS_MARKER": "CARD",
            "DUOLEDGER_DB_PATH": "/tmp/ledger.db",
            "DUOLEDGER_LOG_LEVEL": "debug",
        }
    )

    assert settings.parties.as_tuple() == ("Ana", "Besa")
    assert settings.shared_marker == "PROJECT"
    assert settings.pos_marker == "CARD"
    assert settings.database_path == "/tmp/ledger.db"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["Ana", "Ana,Besa,Cen", "Ana,Ana"])
def test_invalid_party_pair(value):
    with pytest.raises(ValidationError):
        parse_parties(value)


def test_party_pair_other():
    pair = PartyPair("Ana", "Besa")

    assert pair.other("Ana") == "Besa"
    assert pair.other("Besa") == "Ana"
    assert "Ana" in pair
    assert "Cen" not in pair
    with pytest.raises(ValueError):
        pair.other("Cen")
