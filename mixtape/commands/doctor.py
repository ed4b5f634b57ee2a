from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..config import Settings, StoreSettings
from ..errors import MixtapeError
from ..snapshot import load_snapshot
from .output import CheckLine, Status


@dataclass(slots=True)
class DoctorReport:
    lines: list[CheckLine] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(line.failed for line in self.lines)

    @property
    def checks(self) -> list[str]:
        return [line.render() for line in self.lines]


def run(settings: Settings, *, snapshot: Path) -> DoctorReport:
    report = DoctorReport()

    # Load leniently so every problem is reported instead of the first one.
    try:
        store = load_snapshot(snapshot, StoreSettings())
    except MixtapeError as exc:
        report.lines.append(CheckLine("Snapshot", Status.ERROR, str(exc)))
        return report
    report.lines.append(
        CheckLine(
            "Snapshot",
            Status.OK,
            f"{len(store.users)} user(s), {len(store.songs)} song(s), "
            f"{len(store.playlists)} playlist(s)",
        )
    )
    report.lines.append(CheckLine.from_problems("Indexes", store.index_problems()))
    report.lines.append(
        CheckLine.from_problems(
            "Unique ids",
            store.duplicate_ids(),
            severity=Status.ERROR if settings.store.unique_ids else Status.WARNING,
        )
    )
    report.lines.append(
        CheckLine.from_problems("References", store.reference_problems())
    )
    report.lines.append(
        CheckLine.from_problems(
            "Next playlist id",
            store.counter_problems(),
            ok_detail=str(store.next_playlist_id),
        )
    )
    return report
