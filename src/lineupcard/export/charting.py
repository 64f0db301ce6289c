from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from lineupcard.roster.card import BENCH_MARK, LineupCard


class ChartRenderer(Protocol):
    def render_playing_time(self, title: str, names: Sequence[str], innings: Sequence[int], path: Path) -> Path: ...

    def render_lineup_card(self, card: LineupCard, path: Path) -> Path: ...


@dataclass(slots=True)
class MatplotlibChartRenderer:
    """Off-screen matplotlib renderer; swappable behind ChartRenderer contract."""

    dpi: int = 100

    def render_playing_time(self, title: str, names: Sequence[str], innings: Sequence[int], path: Path) -> Path:
        fig = Figure(figsize=(6.0, max(2.4, 0.35 * len(names) + 1.0)), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)
        ax.barh(list(names), list(innings), color="#3b6ea5")
        ax.invert_yaxis()
        ax.set_xlabel("Innings in the field")
        ax.set_title(title)
        ax.grid(axis="x", alpha=0.3)
        fig.tight_layout()
        return self._save(fig, path)

    def render_lineup_card(self, card: LineupCard, path: Path) -> Path:
        fig = Figure(figsize=(1.6 + 0.7 * card.innings, 0.4 * len(card.rows) + 1.2), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)
        ax.axis("off")
        ax.set_title(card.title)
        columns = ["Player"] + [f"Inning {i}" for i in range(1, card.innings + 1)]
        cells = [[row.name] + row.positions for row in card.rows] or [[""] + [BENCH_MARK] * card.innings]
        table = ax.table(cellText=cells, colLabels=columns, loc="center", cellLoc="center")
        table.auto_set_font_size(False)
        table.set_fontsize(9)
        fig.tight_layout()
        return self._save(fig, path)

    @staticmethod
    def _save(fig: Figure, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, format="png")
        return path
