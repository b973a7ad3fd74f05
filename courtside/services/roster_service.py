"""
Roster service for the Courtside rotation application.

This module provides business logic for managing the club roster: player
validation, check-in/check-out, deletion and the admin-only stats reset.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from ..errors import ValidationError
from ..models import Player
from ..models.player import STAT_FIELDS
from ..utils.constants import MIN_SKILL_LEVEL, MAX_SKILL_LEVEL
from .admin_gate import AdminGate
from .persistence_service import BatchWriteReport, PersistenceService
from .roster_store import RosterStore, StoreResult, UpdateRecord, normalize_update

logger = logging.getLogger(__name__)


class RosterService:
    """
    Service class for roster operations performed outside of a round.

    Args:
        store: Roster store backing the service
        admin_gate: Gate checked before destructive admin actions
        persistence: Writer used for bulk updates (defaults to one on ``store``)
        orchestrator: Running orchestrator whose in-memory stats must be
            cleared on an admin reset (optional)
    """

    MAX_NAME_LENGTH = 60

    def __init__(
        self,
        store: RosterStore,
        admin_gate: Optional[AdminGate] = None,
        persistence: Optional[PersistenceService] = None,
        orchestrator: Optional[Any] = None,
    ):
        self.store = store
        self.admin_gate = admin_gate or AdminGate()
        self.persistence = persistence or PersistenceService(store)
        self.orchestrator = orchestrator

    def validate_player_data(self, data: Dict[str, Any]) -> List[str]:
        """
        Validate a player payload and return the list of problems.

        Args:
            data: Player fields as received from a client

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        name = str(data.get("name") or "").strip()
        if not name:
            errors.append("Player name is required")
        elif len(name) > self.MAX_NAME_LENGTH:
            errors.append(f"Player name must be at most {self.MAX_NAME_LENGTH} characters")

        try:
            level = int(data.get("skill_level", 0))
            if not MIN_SKILL_LEVEL <= level <= MAX_SKILL_LEVEL:
                errors.append(f"Skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}")
        except (TypeError, ValueError):
            errors.append("Skill level must be a whole number")

        for counter in ("bench_count", "last_played_round"):
            if counter in data:
                try:
                    if int(data[counter]) < 0:
                        errors.append(f"{counter} cannot be negative")
                except (TypeError, ValueError):
                    errors.append(f"{counter} must be a whole number")

        return errors

    def build_player(self, data: Dict[str, Any]) -> Player:
        """
        Create a validated Player from client data, assigning an id if needed.

        Raises:
            ValidationError: If the data is invalid
        """
        errors = self.validate_player_data(data)
        if errors:
            raise ValidationError(f"Player validation failed: {'; '.join(errors)}")

        return Player(
            id=str(data.get("id") or uuid.uuid4()),
            name=str(data["name"]).strip(),
            skill_level=int(data["skill_level"]),
            is_present=bool(data.get("is_present", False)),
            bench_count=int(data.get("bench_count", 0)),
            last_played_round=int(data.get("last_played_round", 0)),
        )

    def list_players(self) -> List[Player]:
        return self.store.list()

    def save_players(self, payloads: List[Dict[str, Any]]) -> StoreResult:
        """Validate and upsert players.

        Raises:
            ValidationError: If any payload is invalid (nothing is written)
        """
        players = [self.build_player(p) for p in payloads]
        return self.store.upsert(players)

    def set_presence(self, player_id: str, present: bool) -> StoreResult:
        return self.store.batch_update([UpdateRecord(player_id, {"is_present": bool(present)})])

    def update_players(self, payloads: List[Dict[str, Any]]) -> BatchWriteReport:
        """Apply client update payloads (either nested or flat shape) in chunks.

        Raises:
            ValidationError: If any payload is malformed
        """
        if not payloads:
            raise ValidationError("Missing updates array")
        return self.persistence.write([normalize_update(p) for p in payloads])

    def delete_player(self, player_id: str) -> StoreResult:
        if not player_id:
            raise ValidationError("Missing id")
        return self.store.delete([player_id])

    def reset_all_stats(self, password: str) -> Optional[BatchWriteReport]:
        """
        Zero every player's bench count and last-played round.

        Returns:
            The write report, or None when the password is rejected
        """
        if not self.admin_gate.verify(password):
            logger.warning("Rejected stats reset: bad admin password")
            return None

        updates = [
            UpdateRecord(p.id, {field: 0 for field in STAT_FIELDS})
            for p in self.store.list()
        ]
        report = self.persistence.write(updates)
        if self.orchestrator is not None:
            self.orchestrator.reset_player_stats()
        logger.info("Reset stats for %d player(s)", len(updates))
        return report
