def pct_str(x, signed=False):
    try:
        if x is None:
            return "n/a"
        val = float(x)
        sign = "+" if (signed and val >= 0) else ""
        return f"{sign}{val:.2f}%"
    except Exception:
        return "n/a"

def fmt_date(d):
    return d.isoformat() if d else "n/a"

def phase_table(result):
    """Plain-text table of the four phase rows."""
    head = f"{'Phase':<14}{'Avg':>9}{'Max':>9}{'Min':>9}{'Count':>7}{'Diff':>9}"
    lines = [head, "-" * len(head)]
    for s in result.summaries:
        diff = s.avg_range - result.period_average
        lines.append(
            f"{s.phase.label:<14}{pct_str(s.avg_range):>9}{pct_str(s.max_range):>9}"
            f"{pct_str(s.min_range):>9}{s.count:>7}{pct_str(diff, signed=True):>9}"
        )
    lines.append("-" * len(head))
    lines.append(f"Period avg: {pct_str(result.period_average)}   "
                 f"window start: {fmt_date(result.window_start)}   "
                 f"rows: {result.moon_rows_used} moon / {result.price_rows_used} price")
    return "\n".join(lines)
