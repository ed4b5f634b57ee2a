from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..changes import read_changes
from ..config import Settings
from ..errors import BatchError
from ..processor import BatchProcessor, CommandFailure
from ..snapshot import load_snapshot, write_snapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplyReport:
    total: int
    applied: int
    failures: list[CommandFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def run(
    settings: Settings,
    *,
    snapshot_in: Path,
    changes: Path,
    snapshot_out: Path,
) -> ApplyReport:
    """Load a snapshot, apply every change and write the result.

    The output snapshot is written even when some changes fail; those failures
    are returned in the report. Load, read and write problems raise.
    """
    store = load_snapshot(snapshot_in, settings.store)
    records = read_changes(
        changes,
        delimiter=settings.changes.delimiter,
        comment=settings.changes.comment,
    )
    processor = BatchProcessor(records, store)
    try:
        applied = processor.process_all()
    except BatchError as exc:
        applied = len(records) - len(exc.failures)
        logger.warning("%s; writing partial result", exc)
    write_snapshot(store, snapshot_out, settings.snapshot)
    return ApplyReport(total=len(records), applied=applied, failures=processor.errors)
