"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from duoledger.domain.entities import PartyPair
from duoledger.domain.errors import ValidationError

DEFAULT_PARTIES = ("Burimi", "Skenderi")
DEFAULT_SHARED_MARKER = "GINGER"
DEFAULT_POS_MARKER = "POS"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the CLI and the services."""

    parties: PartyPair
    shared_marker: str = DEFAULT_SHARED_MARKER
    pos_marker: str = DEFAULT_POS_MARKER
    database_path: Optional[str] = None
    log_level: str = "WARNING"


def parse_parties(value: str) -> PartyPair:
    """Parse a comma-separated pair such as ``"Burimi,Skenderi"``."""
    names = [part.strip() for part in value.split(",") if part.strip()]
    if len(names) != 2:
        raise ValidationError(
            f"Exactly two tracked parties are required, got {len(names)}: '{value}'"
        )
    return PartyPair(names[0], names[1])


def default_database_path() -> str:
    """Return ~/.duoledger/duoledger.db, creating the directory."""
    db_dir = Path.home() / ".duoledger"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "duoledger.db")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``DUOLEDGER_*`` environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ`` (used by tests)

    Returns:
        Settings instance

    Raises:
        ValidationError: If DUOLEDGER_PARTIES does not name two distinct parties
    """
    if environ is None:
        environ = os.environ

    parties_value = environ.get("DUOLEDGER_PARTIES")
    if parties_value:
        parties = parse_parties(parties_value)
    else:
        parties = PartyPair(*DEFAULT_PARTIES)

    return Settings(
        parties=parties,
        shared_marker=environ.get("DUOLEDGER_SHARED_MARKER") or DEFAULT_SHARED_MARKER,
        pos_marker=environ.get("DUOLEDGER_POS_MARKER") or DEFAULT_POS_MARKER,
        database_path=environ.get("DUOLEDGER_DB_PATH"),
        log_level=(environ.get("DUOLEDGER_LOG_LEVEL") or "WARNING").upper(),
    )
