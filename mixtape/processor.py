from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import BatchError, CommandError
from .protocol import dispatch
from .store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandFailure:
    position: int
    record: Tuple[str, ...]
    error: CommandError

    def __str__(self) -> str:
        return f"#{self.position + 1}: {self.error}"


class BatchProcessor:
    """Applies a sequence of change records to one Store, best effort.

    A failing record is recorded and the run moves on, so a later record that
    depends on an earlier failed one fails against the then-current state.
    """

    def __init__(self, commands: Sequence[Sequence[str]], store: Store) -> None:
        self.commands = [tuple(record) for record in commands]
        self.store = store
        self._failures: List[CommandFailure] = []

    @property
    def errors(self) -> List[CommandFailure]:
        return list(self._failures)

    def process_all(self) -> int:
        """Apply every record in order and return how many succeeded.

        Raises BatchError after the full pass if any record failed; the same
        failures remain available from ``errors``.
        """
        self._failures = []
        applied = 0
        for position, record in enumerate(self.commands):
            try:
                command, result = dispatch(record, self.store)
            except CommandError as exc:
                logger.info("Change #%d failed: %s", position + 1, exc)
                self._failures.append(CommandFailure(position, record, exc))
                continue
            applied += 1
            logger.debug("Change #%d applied: %r -> %r", position + 1, command, result)
        logger.info(
            "Applied %d of %d change(s), %d failed",
            applied,
            len(self.commands),
            len(self._failures),
        )
        if self._failures:
            raise BatchError(self._failures)
        return applied
