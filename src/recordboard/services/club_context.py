"""Which club a session is working on.

The selection is an explicit object handed to whatever needs it, backed by a
small key-value store. A stale or missing saved id falls back to the user's
first club.
"""

import json
from pathlib import Path
from typing import Protocol

from recordboard.errors import NotFoundError
from recordboard.logging import get_logger
from recordboard.models.club import Club, ClubWithRole, MemberRole

logger = get_logger(__name__)

SELECTED_CLUB_KEY = "selected_club_id"

CONFIG_DIR = Path.home() / ".recordboard"
STATE_FILE = CONFIG_DIR / "state.json"


class SelectionStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemorySelectionStore:
    """Per-process store; nothing persists. Used in tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class FileSelectionStore:
    """JSON file store for the CLI, in ~/.recordboard/state.json by default."""

    def __init__(self, path: Path = STATE_FILE):
        self.path = path

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("selection_state_unreadable", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))


class ClubSelection:
    """The selected club among a user's memberships."""

    def __init__(self, memberships: list[ClubWithRole], store: SelectionStore):
        self.memberships = memberships
        self.store = store

    @property
    def clubs(self) -> list[Club]:
        return [m.club for m in self.memberships]

    def _find(self, club_id: str | None) -> ClubWithRole | None:
        if not club_id:
            return None
        return next((m for m in self.memberships if m.club.id == club_id), None)

    @property
    def selected_membership(self) -> ClubWithRole | None:
        saved = self._find(self.store.get(SELECTED_CLUB_KEY))
        if saved is not None:
            return saved
        return self.memberships[0] if self.memberships else None

    @property
    def selected(self) -> Club | None:
        membership = self.selected_membership
        return membership.club if membership else None

    @property
    def role(self) -> MemberRole | None:
        membership = self.selected_membership
        return membership.role if membership else None

    def select(self, club_id: str) -> Club:
        """Select and persist a club. It must be one of the user's clubs."""
        membership = self._find(club_id)
        if membership is None:
            raise NotFoundError("Club not found")
        self.store.set(SELECTED_CLUB_KEY, club_id)
        return membership.club
