from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from .errors import ChangesFileError

logger = logging.getLogger(__name__)


class _RecordLines:
    """Feed lines to ``csv.reader``, dropping comments and blanks between records.

    Lines read while a quoted field is still open belong to that field and are
    passed through unchanged.
    """

    def __init__(self, lines: Iterable[str], comment: str) -> None:
        self._lines = iter(lines)
        self._comment = comment
        self.at_record_start = True

    def __iter__(self) -> Iterator[str]:
        for line in self._lines:
            if self.at_record_start and (
                line.startswith(self._comment) or not line.strip()
            ):
                continue
            self.at_record_start = False
            yield line


def parse_changes(
    lines: Iterable[str], *, delimiter: str = ",", comment: str = "#"
) -> List[Tuple[str, ...]]:
    """Split change lines into records; the field count may differ per record."""
    source = _RecordLines(lines, comment)
    records: List[Tuple[str, ...]] = []
    for row in csv.reader(iter(source), delimiter=delimiter):
        source.at_record_start = True
        records.append(tuple(row))
    return records


def read_changes(
    path: Path, *, delimiter: str = ",", comment: str = "#"
) -> List[Tuple[str, ...]]:
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            records = parse_changes(fh, delimiter=delimiter, comment=comment)
    except OSError as exc:
        raise ChangesFileError(path, exc.strerror or str(exc)) from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise ChangesFileError(path, str(exc)) from exc
    logger.info("Read %d change(s) from %s", len(records), path)
    return records
