"""
Batch persistence for the Courtside rotation application.

This module writes per-round stat updates to the roster store in chunks,
on a background worker so the round timer is never blocked by the network.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from ..errors import PartialPersistenceFailure, RosterStoreError
from ..utils.constants import BATCH_CHUNK_SIZE
from .roster_store import RosterStore, UpdateRecord

logger = logging.getLogger(__name__)


@dataclass
class BatchWriteReport:
    """
    Outcome of one batch write.

    Attributes:
        total: Updates submitted
        applied: Rows the store reported as updated
        chunks: Number of chunks sent
        failure: Set when at least one chunk failed
    """
    total: int
    applied: int
    chunks: int
    failure: Optional[PartialPersistenceFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "applied": self.applied,
            "chunks": self.chunks,
            "ok": self.ok,
            "failed_ids": self.failure.failed_ids if self.failure else [],
            "errors": self.failure.errors if self.failure else [],
        }


class PersistenceService:
    """
    Service for pushing stat updates to the roster store.

    Updates are sent in chunks of at most ``chunk_size``. A failed chunk is
    logged and reported; it does not stop later chunks and earlier chunks
    are not rolled back.
    """

    def __init__(
        self,
        store: RosterStore,
        chunk_size: int = BATCH_CHUNK_SIZE,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.store = store
        self.chunk_size = max(1, chunk_size)
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="roster-writer")

    @staticmethod
    def chunk(updates: List[UpdateRecord], size: int) -> List[List[UpdateRecord]]:
        """Split ``updates`` into consecutive chunks of at most ``size``."""
        return [updates[i:i + size] for i in range(0, len(updates), size)]

    def write(self, updates: List[UpdateRecord]) -> BatchWriteReport:
        """
        Write ``updates`` synchronously, chunk by chunk.

        Returns:
            BatchWriteReport; ``failure`` lists the ids from failed chunks
        """
        chunks = self.chunk(list(updates), self.chunk_size)
        applied = 0
        failed_ids: List[str] = []
        errors: List[str] = []

        for index, chunk in enumerate(chunks, start=1):
            try:
                result = self.store.batch_update(chunk)
                error = result.error
                rows = result.rows
            except RosterStoreError as e:
                error, rows = e, []
            except Exception as e:
                logger.exception("Roster update chunk %d/%d raised", index, len(chunks))
                error, rows = e, []

            applied += len(rows)
            if error is not None:
                written = {str(row.get("id")) for row in rows}
                failed_ids.extend(u.id for u in chunk if u.id not in written)
                errors.append(str(error))
                logger.warning("Roster update chunk %d/%d failed: %s", index, len(chunks), error)

        failure = PartialPersistenceFailure(failed_ids, errors) if errors else None
        if failure is None:
            logger.debug("Wrote %d updates in %d chunk(s)", len(updates), len(chunks))
        return BatchWriteReport(total=len(updates), applied=applied, chunks=len(chunks), failure=failure)

    def submit(self, updates: List[UpdateRecord]) -> "Future[BatchWriteReport]":
        """Queue ``updates`` for a background :meth:`write`."""
        return self._executor.submit(self.write, list(updates))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
