import pytest

from moon_engine.aggregator import PhaseSummary, aggregate
from moon_engine.periods import DEFAULT_PERIOD, PERIODS, parse_period, period_label, period_options, resolve_default
from moon_engine.records import Phase
from moon_engine.tooltip import phase_tooltip, tooltip_lines


@pytest.mark.parametrize("n,label", [
    (1, "1 cycle (30 days)"),
    (3, "3 cycles (89 days)"),
    (12, "12 cycles (354 days)"),
    (84, "84 cycles (2478 days)"),
])
def test_period_label(n, label):
    assert period_label(n) == label


def test_parse_period():
    assert parse_period("24") == 24
    assert parse_period(None, default=6) == 6
    assert parse_period("", default=6) == 6
    for bad in ("5", "abc", "-1"):
        with pytest.raises(ValueError):
            parse_period(bad)


def test_resolve_default_falls_back_to_twelve(caplog):
    assert resolve_default("24") == 24
    assert resolve_default(None) == DEFAULT_PERIOD
    assert resolve_default(7) == DEFAULT_PERIOD
    assert resolve_default("abc") == DEFAULT_PERIOD
    assert "[Config]" in caplog.text


def test_period_options_mark_selected():
    opts = period_options(36)
    assert [o["value"] for o in opts] == list(PERIODS)
    assert [o["value"] for o in opts if o["selected"]] == [36]


def test_tooltip_above_average(moon_rows, price_rows):
    result = aggregate(moon_rows, price_rows, 1)
    last = result.summaries[3]
    tip = phase_tooltip(last, result.period_average)

    assert tip["phase"] == "Last Quarter"
    assert tip["average"] == "4.00"
    assert tip["periodAvg"] == "2.50"
    assert tip["diff"] == "1.50"
    assert tip["diffPercent"] == "60.0"
    assert tip["above"] is True
    assert tip["samples"] == 1


def test_tooltip_below_average(moon_rows, price_rows):
    result = aggregate(moon_rows, price_rows, 1)
    tip = phase_tooltip(result.summaries[0], result.period_average)
    assert tip["diff"] == "-0.25"
    assert tip["diffPercent"] == "-10.0"
    assert tip["above"] is False


def test_tooltip_zero_period_average():
    tip = phase_tooltip(PhaseSummary(phase=Phase.FULL_MOON), 0.0)
    assert tip["diffPercent"] is None
    assert "Difference: 0.00% (n/a)" in tooltip_lines(tip)


def test_tooltip_lines_order(moon_rows, price_rows):
    result = aggregate(moon_rows, price_rows, 1)
    lines = tooltip_lines(phase_tooltip(result.summaries[1], result.period_average))
    assert lines == [
        "Average: 3.00%",
        "Period Avg: 2.50%",
        "Difference: 0.50% (20.0%)",
        "Max: 3.00%",
        "Min: 3.00%",
        "Samples: 1",
    ]
