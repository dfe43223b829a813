# ============================================================
# plot_engine.py - Moon phase chart builders
# Plotly figure for the web page, matplotlib PNG for exports
# ============================================================

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import plotly.graph_objects as go

from chart_json import COLORS
from moon_engine.aggregator import AggregationResult
from moon_engine.tooltip import phase_tooltip, tooltip_lines

logger = logging.getLogger("moonrange.plot")

# ---------- plotly ----------
def _hover_text(result: AggregationResult):
    out = []
    for s in result.summaries:
        tip = phase_tooltip(s, result.period_average)
        out.append(f"<b>{tip['phase']}</b><br>" + "<br>".join(tooltip_lines(tip)))
    return out

def fig_phases(result: AggregationResult, h: int = 420) -> go.Figure:
    """Two series: per-phase average (solid) and period average (dashed)."""
    labels = [s.phase.label for s in result.summaries]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=labels, y=[s.avg_range for s in result.summaries],
        name="Moon Phase Avg", mode="lines+markers",
        line=dict(color=COLORS["moonPhase"], width=3, shape="spline"),
        marker=dict(size=12, color=COLORS["moonPhase"]),
        text=_hover_text(result), hovertemplate="%{text}<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=labels, y=[result.period_average] * len(labels),
        name="Period Avg", mode="lines",
        line=dict(color=COLORS["periodAvg"], width=2, dash="dash"),
        hoverinfo="skip",
    ))
    if not result.has_data:
        fig.add_annotation(
            text="No data for this period.",
            showarrow=False,
            xref="paper", yref="paper", x=0.5, y=0.5,
            font=dict(color=COLORS["text"])
        )
    fig.update_layout(
        template="plotly_white",
        height=h,
        margin=dict(l=20, r=30, t=20, b=20),
        plot_bgcolor=COLORS["background"],
        paper_bgcolor="#ffffff",
        font=dict(color=COLORS["text"]),
        legend=dict(orientation="h", yanchor="top", y=-0.2, x=0.5, xanchor="center"),
        hovermode="closest",
    )
    fig.update_xaxes(title_text="Moon Phase", gridcolor=COLORS["grid"], griddash="dash")
    fig.update_yaxes(title_text="Daily Price Range (%)", gridcolor=COLORS["grid"], griddash="dash")
    return fig

# ---------- matplotlib ----------
def _panel(fig):
    ax = fig.add_subplot(111)
    ax.set_facecolor(COLORS["background"])
    ax.grid(True, color=COLORS["grid"], lw=0.8, ls="--")
    for s in ax.spines.values():
        s.set_color(COLORS["grid"])
    ax.tick_params(colors=COLORS["text"], labelsize=9)
    return ax

def _save(fig, path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # explicit format: matplotlib would otherwise append .png to a bare name
        fig.savefig(path.as_posix(), format="png", dpi=140, bbox_inches="tight", facecolor="#ffffff")
        return True
    except Exception as e:
        logger.error(f"[Export] Failed to save {path}: {e}")
        return False
    finally:
        plt.close(fig)

def render_phase_png(result: AggregationResult, path, title: Optional[str] = None) -> Optional[Path]:
    path = Path(path)
    labels = [s.phase.label for s in result.summaries]
    x = np.arange(len(labels))
    y = [s.avg_range for s in result.summaries]

    fig = plt.figure(figsize=(9, 5), facecolor="#ffffff")
    ax = _panel(fig)
    ax.plot(x, y, color=COLORS["moonPhase"], lw=3, marker="o", ms=8, label="Moon Phase Avg")
    ax.axhline(result.period_average, color=COLORS["periodAvg"], lw=2, ls=(0, (5, 5)), label="Period Avg")
    for xi, s in zip(x, result.summaries):
        ax.annotate(f"{s.avg_range:.2f}% (n={s.count})", (xi, s.avg_range),
                    textcoords="offset points", xytext=(0, 10), ha="center",
                    fontsize=8, color=COLORS["text"])
    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_xlabel("Moon Phase", color=COLORS["text"])
    ax.set_ylabel("Daily Price Range (%)", color=COLORS["text"])
    ax.set_title(title or f"Bitcoin & The Lunar Cycle: {result.period_cycles} cycles",
                 color=COLORS["text"], fontsize=12)
    ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.15), ncol=2, frameon=False)

    if not _save(fig, path):
        return None
    logger.info(f"[Export] chart written to {path}")
    return path
