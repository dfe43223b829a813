from __future__ import annotations
import json, logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, render_template, request
from flask.json.provider import DefaultJSONProvider

import plotly.io as pio

from config import Settings
from chart_json import build_chartjs_payload
from plot_engine import fig_phases
from moon_engine.aggregator import aggregate
from moon_engine.loader import Datasets, LoadError, load_datasets
from moon_engine.periods import DEFAULT_PERIOD, parse_period, period_label, period_options, resolve_default

# ---------- build tag ----------
BUILD_TAG = "MOONRANGE-2026-10-17"

# ---------- logging ----------
LOG = logging.getLogger("moonrange")

# ---------- paths ----------
ROOT = Path(__file__).parent.resolve()
TEMPLATES_DIR = ROOT / "templates"

NOTES = [
    "📊 This visualization shows Bitcoin's price volatility during different moon phases.",
    "🎯 The solid line shows the average price range during each moon phase.",
    "📈 The dashed line represents the overall average for the selected period.",
    "💡 Hover over data points for detailed statistics!",
]

# ---------- Flask JSON for Plotly ----------
class PlotlyJSON(DefaultJSONProvider):
    def dumps(self, obj, **kwargs):
        from plotly.utils import PlotlyJSONEncoder
        return json.dumps(obj, cls=PlotlyJSONEncoder, **kwargs)

def utcnow() -> datetime: return datetime.now(timezone.utc)

def load_or_empty(settings) -> Datasets:
    """One-shot load at startup; any failure leaves the app in the empty state."""
    moon_path, price_path = settings.moon_path(), settings.price_path()
    try:
        return load_datasets(moon_path, price_path, strict=settings.STRICT_DATES)
    except LoadError as e:
        LOG.error(f"[Load] failed: {e}; serving empty data")
        return Datasets.empty(str(e))

def create_app(settings=Settings, datasets: Optional[Datasets] = None) -> Flask:
    app = Flask(__name__, template_folder=str(TEMPLATES_DIR))
    app.json = PlotlyJSON(app)

    data = datasets if datasets is not None else load_or_empty(settings)
    default_period = resolve_default(getattr(settings, "DEFAULT_PERIOD", DEFAULT_PERIOD))
    app.extensions["moonrange"] = {"datasets": data, "default_period": default_period}

    def compute(period: int):
        d = app.extensions["moonrange"]["datasets"]
        return aggregate(d.moon_rows, d.price_rows, period)

    def api_period():
        # API callers get a 400 for anything outside the selector values
        return parse_period(request.args.get("period"), default_period)

    # ---------- routes ----------
    @app.get("/")
    def home():
        raw = request.args.get("period")
        try:
            period = parse_period(raw, default_period)
        except ValueError as e:
            LOG.warning(f"[UI] {e}; falling back to {default_period}")
            period = default_period

        d = app.extensions["moonrange"]["datasets"]
        chart_html = None
        result = None
        if not d.is_empty:
            result = compute(period)
            chart_html = pio.to_html(fig_phases(result), include_plotlyjs="cdn", full_html=False,
                                     config={"displayModeBar": False, "responsive": True})

        return render_template(
            "moon_panel.html",
            brand=settings.BRAND_NAME, period=period, period_text=period_label(period),
            options=period_options(period), chart_html=chart_html, result=result,
            notes=NOTES, build=BUILD_TAG,
        )

    @app.get("/api/periods")
    def api_periods():
        return jsonify({"default": default_period, "periods": period_options(default_period)})

    @app.get("/api/phases")
    def api_phases():
        try:
            period = api_period()
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(compute(period).to_dict())

    @app.get("/api/chart")
    def api_chart():
        try:
            period = api_period()
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(build_chartjs_payload(compute(period)))

    @app.get("/api/figure")
    def api_figure():
        try:
            period = api_period()
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"period": period, "fig": fig_phases(compute(period)).to_plotly_json()})

    @app.get("/healthz")
    def healthz():
        d = app.extensions["moonrange"]["datasets"]
        return jsonify({
            "loaded": not d.is_empty,
            "moon_rows": len(d.moon_rows),
            "price_rows": len(d.price_rows),
            "rejected": d.rejected,
            "loaded_at": d.loaded_at.isoformat() if d.loaded_at else None,
            "errors": list(d.errors[:10]),
            "now": utcnow().replace(microsecond=0).isoformat(),
            "build": BUILD_TAG,
        })

    return app

# ---------- run ----------
if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, Settings.LOG_LEVEL, logging.INFO),
        format='[%(asctime)s] %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    LOG.info(f"✅ Moon Range running, data dir: {Settings.DATA_DIR}")
    create_app().run(host=Settings.HOST, port=Settings.PORT, debug=False)
