"""
Roster store boundary for the Courtside rotation application.

The roster itself lives outside the scheduler. This module defines the
contract the scheduler relies on plus three implementations: an in-memory
store, a JSON file store, and a REST client for a hosted PostgREST/Supabase
``players`` table.
"""
import json
import logging
import os
import threading
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Protocol, Union

import requests

from ..errors import ConfigurationError, RosterStoreError, ValidationError
from ..models import Player

logger = logging.getLogger(__name__)


class UpdateRecord(NamedTuple):
    """A single normalised update: which player, which columns."""
    id: str
    fields: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "fields": dict(self.fields)}


class StoreResult(NamedTuple):
    """Rows affected by a mutating call and the error, if any."""
    rows: List[Dict[str, Any]]
    error: Optional[RosterStoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_update(payload: Union[UpdateRecord, Dict[str, Any]]) -> UpdateRecord:
    """
    Normalise an update payload into an :class:`UpdateRecord`.

    Accepts ``{"id": ..., "fields": {...}}`` as well as the flat
    ``{"id": ..., "is_present": true}`` shape.

    Raises:
        ValidationError: If the id or the fields are missing
    """
    if isinstance(payload, UpdateRecord):
        record = payload
    elif isinstance(payload, dict):
        player_id = payload.get("id")
        if not player_id:
            raise ValidationError("Update is missing required field: id")
        if isinstance(payload.get("fields"), dict):
            fields = dict(payload["fields"])
        else:
            fields = {k: v for k, v in payload.items() if k not in ("id", "fields")}
        record = UpdateRecord(str(player_id), fields)
    else:
        raise ValidationError(f"Unsupported update payload: {payload!r}")

    if not record.fields:
        raise ValidationError(f"Update for {record.id} has no fields")
    if "id" in record.fields:
        raise ValidationError("Player id cannot be changed")
    return record


def _player_row(player: Union[Player, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(player, Player):
        return player.to_dict()
    try:
        return Player.from_dict(player).to_dict()
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid player record: {e}") from e


def _rows_to_players(rows: Iterable[Dict[str, Any]]) -> List[Player]:
    players = []
    for row in rows:
        try:
            players.append(Player.from_dict(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed roster row %r: %s", row.get("id"), e)
    return sorted(players, key=lambda p: (p.sort_name(), p.id))


class RosterStore(Protocol):
    """Contract for the external roster store."""

    def list(self) -> List[Player]:
        ...

    def batch_update(self, updates: List[UpdateRecord]) -> StoreResult:
        ...

    def upsert(self, players: List[Union[Player, Dict[str, Any]]]) -> StoreResult:
        ...

    def delete(self, ids: List[str]) -> StoreResult:
        ...


class InMemoryRosterStore:
    """Roster kept in a dictionary; used by tests and as the base of the file store."""

    def __init__(self, players: Optional[Iterable[Player]] = None):
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        for player in players or ():
            self._rows[player.id] = player.to_dict()

    def list(self) -> List[Player]:
        with self._lock:
            rows = [dict(row) for row in self._rows.values()]
        return _rows_to_players(rows)

    def batch_update(self, updates: List[UpdateRecord]) -> StoreResult:
        try:
            records = [normalize_update(u) for u in updates]
        except ValidationError as e:
            return StoreResult([], RosterStoreError(str(e), status_code=400))

        applied = []
        with self._lock:
            for record in records:
                row = self._rows.get(record.id)
                if row is None:
                    # Unknown ids affect zero rows rather than failing the batch
                    continue
                row.update(record.fields)
                applied.append(dict(row))
            self._after_write()
        return StoreResult(applied)

    def upsert(self, players: List[Union[Player, Dict[str, Any]]]) -> StoreResult:
        try:
            rows = [_player_row(p) for p in players]
        except ValidationError as e:
            return StoreResult([], RosterStoreError(str(e), status_code=400))
        if not rows:
            return StoreResult([], RosterStoreError("No players provided", status_code=400))

        with self._lock:
            for row in rows:
                self._rows[row["id"]] = row
            self._after_write()
        return StoreResult([dict(r) for r in rows])

    def delete(self, ids: List[str]) -> StoreResult:
        if not ids:
            return StoreResult([], RosterStoreError("Missing id", status_code=400))
        removed = []
        with self._lock:
            for player_id in ids:
                row = self._rows.pop(str(player_id), None)
                if row is not None:
                    removed.append(row)
            self._after_write()
        return StoreResult(removed)

    def _after_write(self) -> None:
        """Hook called with the lock held after every mutation."""
        pass


class JsonFileRosterStore(InMemoryRosterStore):
    """Roster persisted to a JSON file after every change."""

    def __init__(self, file_path: str):
        super().__init__()
        self.file_path = file_path
        if os.path.exists(file_path):
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            for row in data.get("players", []):
                try:
                    self._rows[str(row["id"])] = _player_row(row)
                except (KeyError, ValidationError) as e:
                    logger.warning("Ignoring invalid player in %s: %s", file_path, e)

    def _after_write(self) -> None:
        directory = os.path.dirname(self.file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump({"players": list(self._rows.values())}, f, indent=2)


class RestRosterStore:
    """
    Client for a PostgREST ``players`` table (as exposed by Supabase).

    Raises:
        ConfigurationError: If the URL or key is missing
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        table: str = "players",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not base_url or not api_key:
            raise ConfigurationError("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE/ANON_KEY")
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def list(self) -> List[Player]:
        """
        Fetch every player, ordered by name.

        Raises:
            RosterStoreError: If the request fails
        """
        rows = self._request("GET", params={"select": "*", "order": "name.asc"})
        return _rows_to_players(rows)

    def batch_update(self, updates: List[UpdateRecord]) -> StoreResult:
        applied: List[Dict[str, Any]] = []
        for update in updates:
            try:
                record = normalize_update(update)
                rows = self._request(
                    "PATCH",
                    params={"id": f"eq.{record.id}"},
                    json=record.fields,
                    headers={"Prefer": "return=representation"},
                )
            except ValidationError as e:
                return StoreResult(applied, RosterStoreError(str(e), status_code=400))
            except RosterStoreError as e:
                logger.error("[players][PATCH] update failed for %s: %s", record.id, e)
                return StoreResult(applied, e)
            applied.extend(rows)
        return StoreResult(applied)

    def upsert(self, players: List[Union[Player, Dict[str, Any]]]) -> StoreResult:
        try:
            rows = [_player_row(p) for p in players]
        except ValidationError as e:
            return StoreResult([], RosterStoreError(str(e), status_code=400))
        if not rows:
            return StoreResult([], RosterStoreError("No players provided", status_code=400))
        try:
            rows = self._request(
                "POST",
                params={"on_conflict": "id"},
                json=rows,
                headers={"Prefer": "resolution=merge-duplicates,return=representation"},
            )
        except RosterStoreError as e:
            logger.error("[players][POST] upsert error: %s", e)
            return StoreResult([], e)
        return StoreResult(rows)

    def delete(self, ids: List[str]) -> StoreResult:
        if not ids:
            return StoreResult([], RosterStoreError("Missing id", status_code=400))
        id_list = ",".join(str(i) for i in ids)
        try:
            rows = self._request(
                "DELETE",
                params={"id": f"in.({id_list})"},
                headers={"Prefer": "return=representation"},
            )
        except RosterStoreError as e:
            logger.error("[players][DELETE] error: %s", e)
            return StoreResult([], e)
        return StoreResult(rows)

    def _request(self, method: str, **kwargs: Any) -> List[Dict[str, Any]]:
        """Send one request and return the decoded rows.

        Raises:
            RosterStoreError: On transport errors, error statuses or a body that is not JSON
        """
        try:
            response = self.session.request(method, self.endpoint, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise RosterStoreError(f"{method} {self.endpoint} failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise RosterStoreError(f"{method} {self.endpoint} failed: {e}") from e
        if not response.content:
            return []
        try:
            return response.json() or []
        except ValueError as e:
            raise RosterStoreError(
                f"{method} {self.endpoint} returned invalid JSON: {e}", status_code=response.status_code
            ) from e
