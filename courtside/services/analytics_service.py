"""Analytics helpers for the Courtside rotation application."""

from __future__ import annotations

import csv
import io
import statistics
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from ..models import (
    Player, PlayerFairnessSummary, Round, RoundDiagnostics, SessionReport, SessionState
)
from ..utils import now_ts


class ExportServiceInterface(Protocol):
    """Interface for data export - supports ISP."""

    def export_to_csv(self, report: SessionReport) -> str:
        """Export report to CSV format."""
        ...


class SessionReportExporter:
    """Writes the per-player part of a :class:`SessionReport` as CSV."""

    HEADER = [
        "Name", "Skill", "Played", "Benched", "Unique Teammates",
        "Unique Opponents", "Worst Bench Streak",
    ]

    def export_to_csv(self, report: SessionReport) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(self.HEADER)
        for summary in report.players:
            writer.writerow([
                summary.name,
                summary.skill_level,
                summary.played,
                summary.benched,
                summary.unique_teammates,
                summary.unique_opponents,
                summary.worst_bench_streak,
            ])
        return buffer.getvalue()


def played_ids(round_: Round) -> set:
    return set(round_.playing_ids)


def partner_and_opponent_counts(player_id: str, rounds: Iterable[Round]) -> Dict[str, int]:
    """Distinct teammates and opponents ``player_id`` has had across ``rounds``."""
    teammates = set()
    opponents = set()
    for round_ in rounds:
        for match in round_.matches:
            team1 = [p.id for p in match.team1]
            team2 = [p.id for p in match.team2]
            if player_id in team1:
                teammates.update(i for i in team1 if i != player_id)
                opponents.update(team2)
            elif player_id in team2:
                teammates.update(i for i in team2 if i != player_id)
                opponents.update(team1)
    return {"unique_teammates": len(teammates), "unique_opponents": len(opponents)}


def worst_bench_streak(player_id: str, rounds: Iterable[Round]) -> int:
    """Longest run of consecutive rounds ``player_id`` sat out."""
    best = current = 0
    for round_ in rounds:
        if player_id in played_ids(round_):
            best = max(best, current)
            current = 0
        else:
            current += 1
    return max(best, current)


class SessionAnalyticsService:
    """
    Generate reports describing how evenly court time was shared.

    Works on the rounds recorded in a :class:`SessionState`.
    """

    def __init__(
        self,
        session: SessionState,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self.session = session
        self.export_service = export_service or SessionReportExporter()

    def generate_session_report(self, present: Sequence[Player]) -> SessionReport:
        """Build a :class:`SessionReport` for ``present`` players."""
        rounds = list(self.session.rounds)
        present_ids = [p.id for p in present]

        played: Dict[str, int] = {pid: 0 for pid in present_ids}
        benched: Dict[str, int] = {pid: 0 for pid in present_ids}
        for round_ in rounds:
            on_court = played_ids(round_)
            for pid in present_ids:
                if pid in on_court:
                    played[pid] += 1
                else:
                    benched[pid] += 1

        summaries: List[PlayerFairnessSummary] = []
        for player in sorted(present, key=lambda p: (p.sort_name(), p.id)):
            pairs = partner_and_opponent_counts(player.id, rounds)
            summaries.append(
                PlayerFairnessSummary(
                    id=player.id,
                    name=player.name,
                    skill_level=player.skill_level,
                    played=played[player.id],
                    benched=benched[player.id],
                    unique_teammates=pairs["unique_teammates"],
                    unique_opponents=pairs["unique_opponents"],
                    worst_bench_streak=worst_bench_streak(player.id, rounds),
                )
            )

        counts = list(played.values())
        mean_played = statistics.fmean(counts) if counts else 0.0
        sd_played = statistics.pstdev(counts) if counts else 0.0
        spread = (max(counts) - min(counts)) if counts else 0

        diagnostics = [self._diagnose(r) for r in rounds]
        build_times = [d.build_ms for d in diagnostics]

        return SessionReport(
            generated_ts=now_ts(),
            rounds_played=len(rounds),
            present_count=len(present_ids),
            players=summaries,
            rounds=diagnostics,
            mean_played=mean_played,
            sd_played=sd_played,
            spread=spread,
            fairness_ratio=(sd_played / mean_played) if mean_played > 0 else 0.0,
            average_build_ms=statistics.fmean(build_times) if build_times else None,
            played_counts=played,
        )

    def export_report_csv(self, present: Sequence[Player]) -> str:
        return self.export_service.export_to_csv(self.generate_session_report(present))

    @staticmethod
    def _diagnose(round_: Round) -> RoundDiagnostics:
        diffs = [m.diff for m in round_.matches]
        return RoundDiagnostics(
            number=round_.number,
            build_ms=round_.meta.build_ms,
            courts_used=len(round_.matches),
            average_diff=statistics.fmean(diffs) if diffs else 0.0,
            tolerance=round_.meta.tolerance,
            fallback=round_.meta.fallback,
        )
