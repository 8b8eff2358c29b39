"""Income/expense bar charts rendered straight to an image file."""
import logging

from matplotlib.figure import Figure

from utils.constants import EXPENSE_COLOR, INCOME_COLOR

logger = logging.getLogger(__name__)

_BG = "#e4e4e4"
_FG = "#444444"


def _style_ax(ax, fig):
    fig.patch.set_facecolor(_BG)
    ax.set_facecolor(_BG)
    ax.tick_params(colors=_FG, labelsize=8)
    for spine in ax.spines.values():
        spine.set_edgecolor(_FG)


def build_bar_chart(rows: list[dict], title: str = "") -> Figure:
    """Grouped income/expense bars, one group per {'month', 'income', 'expense'} row."""
    fig = Figure(figsize=(8, 3), dpi=100, tight_layout=True)
    ax = fig.add_subplot(111)
    _style_ax(ax, fig)
    if title:
        ax.set_title(title, color=_FG, fontsize=10)

    if not rows:
        ax.text(0.5, 0.5, "No data", ha="center", va="center",
                transform=ax.transAxes, color="gray")
        return fig

    labels = [r["month"] for r in rows]
    incomes = [r.get("income", 0) for r in rows]
    expenses = [r.get("expense", 0) for r in rows]

    x = list(range(len(labels)))
    w = 0.35
    ax.bar([i - w / 2 for i in x], incomes, w, color=INCOME_COLOR, label="Income")
    ax.bar([i + w / 2 for i in x], expenses, w, color=EXPENSE_COLOR, label="Expense")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45 if len(labels) > 6 else 0, ha="right")
    ax.yaxis.set_major_formatter(
        lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
    )
    ax.legend(fontsize=8)
    return fig


def save_bar_chart(rows: list[dict], path: str, title: str = "") -> None:
    fig = build_bar_chart(rows, title)
    fig.savefig(path)
    logger.info("Saved chart with %d period(s) to %s", len(rows), path)
