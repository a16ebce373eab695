# File: src/salestrack/core/batch_import.py
"""Chunked, progress-reporting commits of imported sales entries.

Large workbooks are committed in fixed-size batches. Between batches the
importer yields to the event loop so other requests keep being served, and
only one import per ImportState may be in flight at a time.
"""

import asyncio
import math
import os
from typing import Any, Callable, Iterator, Sequence

from salestrack.core.errors import ImportInProgressError, StoreCommitError
from salestrack.core.logging import get_logger
from salestrack.core.parsing import round_half_up
from salestrack.core.store import SalesStore
from salestrack.models.sales_entry_schemas import SalesEntryRecord

logger = get_logger(__name__)

BATCH_SIZE = int(os.getenv("IMPORT_BATCH_SIZE", "500"))

ProgressCallback = Callable[[int], None]


def iter_batches(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


class ImportState:
    """
    Observable progress of an import, and the guard against overlapping ones.

    ``importing`` is set before the first batch and cleared after the last
    batch or after a failure. ``progress`` is a 0-100 percentage.
    """

    def __init__(self) -> None:
        self.importing = False
        self.progress = 0

    def begin(self) -> None:
        """Claim the state for a new import.

        Raises:
            ImportInProgressError: If another import holds it
        """
        if self.importing:
            raise ImportInProgressError(progress=self.progress)
        self.importing = True
        self.progress = 0

    def release(self) -> None:
        self.importing = False


class BatchImporter:
    """Commits validated entries to a store one batch at a time."""

    def __init__(
        self,
        store: SalesStore,
        *,
        batch_size: int = BATCH_SIZE,
        state: ImportState | None = None,
    ):
        if batch_size < 1:
            raise ValueError("Batch size must be at least 1")
        self.store = store
        self.batch_size = batch_size
        self.state = state or ImportState()

    @property
    def is_importing(self) -> bool:
        return self.state.importing

    @property
    def progress(self) -> int:
        return self.state.progress

    async def import_entries(
        self,
        records: Sequence[SalesEntryRecord],
        on_progress: ProgressCallback | None = None,
    ) -> list[SalesEntryRecord]:
        """
        Commit ``records`` in source order.

        Args:
            records: Validated entries
            on_progress: Called with the percentage after each committed batch

        Returns:
            The stored entries

        Raises:
            ImportInProgressError: If this state already has an import running
            StoreCommitError: If a batch fails; earlier batches stay committed
        """
        self.state.begin()
        total_batches = math.ceil(len(records) / self.batch_size)
        committed: list[SalesEntryRecord] = []

        logger.info(
            "batch_import.started",
            record_count=len(records),
            batch_size=self.batch_size,
            total_batches=total_batches,
        )

        try:
            for number, batch in enumerate(iter_batches(records, self.batch_size), start=1):
                try:
                    stored = await self.store.insert_many(batch)
                except Exception as exc:
                    logger.error(
                        "batch_import.failed",
                        failed_batch=number,
                        total_batches=total_batches,
                        committed_count=len(committed),
                        error=type(exc).__name__,
                    )
                    raise StoreCommitError(
                        "Import stopped before finishing. Some entries may already be "
                        "saved; review them and try again.",
                        details={
                            "failed_batch": number,
                            "total_batches": total_batches,
                            "committed_count": len(committed),
                        },
                    ) from exc

                committed.extend(stored)
                progress = round_half_up(number / total_batches * 100)
                self.state.progress = progress
                if on_progress is not None:
                    on_progress(progress)

                logger.info(
                    "batch_import.batch_committed",
                    batch=number,
                    total_batches=total_batches,
                    progress=progress,
                )

                if number < total_batches:
                    await asyncio.sleep(0)
        finally:
            self.state.release()

        self.state.progress = 100
        logger.info("batch_import.completed", committed_count=len(committed))
        return committed
