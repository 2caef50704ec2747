"""Infinytix Flask UI: dashboard, portfolio and account pages plus a small JSON API."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Any, Mapping

from flask import Flask, flash, got_request_exception, jsonify, redirect, render_template, request, session, url_for
from flask_login import LoginManager, current_user, login_required, login_user, logout_user
from plotly.offline import get_plotlyjs

# Make `python ui/app.py` work without external PYTHONPATH setup.
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config import settings
from config.market import DEFAULT_WATCHLIST, MARKET_INDICES
from core.accounts import AuthenticationError, RegistrationError, UserStore
from core.ai_client import build_ai_client
from core.notifications import is_valid_email, send_password_reset_email, send_welcome_email
from core.opinion import OpinionService
from core.portfolio import InvalidHoldingError, PortfolioStore
from core.stock_data import StockDataService, normalize_ticker
from ui.api import (
    MAX_REQUESTED_TICKERS,
    parse_int,
    parse_ticker_list,
    serialize_holding,
    serialize_index,
    serialize_stock_data,
    serialize_summary,
)
from ui.charts import build_price_chart, cache_busted_static_url
from ui.formatting import register_filters
from ui.models import PortfolioViewModel, StockViewModel


UI_DIR = PROJECT_DIR / "ui"
STATIC_DIR = UI_DIR / "static"

PLOTLY_VENDOR_RELATIVE_PATH = "vendor/plotly.min.js"
PLOTLY_VENDOR_PATH = STATIC_DIR / PLOTLY_VENDOR_RELATIVE_PATH

WATCHLIST_SESSION_KEY = "watchlist"
WATCHLIST_MAX_TICKERS = MAX_REQUESTED_TICKERS
PASSWORD_RESET_MESSAGE = "If an account exists for that email, password reset instructions have been sent."

logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("google").setLevel(logging.WARNING)


def _configure_ui_logger(log_dir: str | Path) -> logging.Logger:
    """Configure one file handler shared by the UI and the core services."""
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "ui.log"

    logger = logging.getLogger("infinytix")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    existing = None
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            existing = handler
            break

    if existing is None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    return logging.getLogger("infinytix.ui")


def _default_config() -> dict[str, Any]:
    return {
        "SECRET_KEY": settings.SECRET_KEY,
        "LOG_DIR": settings.LOG_DIR,
        "AI_ENABLED": settings.AI_ENABLED,
        "GEMINI_API_KEY": settings.GEMINI_API_KEY,
        "GEMINI_MODEL": settings.GEMINI_MODEL,
        "AI_TIMEOUT_SECONDS": settings.AI_TIMEOUT_SECONDS,
        "DEFAULT_TICKER": settings.DEFAULT_TICKER,
        "STOCK_FETCH_WORKERS": settings.STOCK_FETCH_WORKERS,
        "DEMO_USER_EMAIL": settings.DEMO_USER_EMAIL,
        "DEMO_USER_PASSWORD": settings.DEMO_USER_PASSWORD,
        "DEMO_USER_NAME": settings.DEMO_USER_NAME,
        "WRITE_PLOTLY_BUNDLE": True,
    }


def _safe_next_url(target: str | None) -> str | None:
    """Accept only same-site relative redirect targets."""
    if not target or not target.startswith("/") or target.startswith("//"):
        return None
    return target


def create_app(config_overrides: Mapping[str, Any] | None = None, ai_client: Any = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(
        __name__,
        template_folder=str(UI_DIR / "templates"),
        static_folder=str(STATIC_DIR),
    )
    app.config.from_mapping(_default_config())
    if config_overrides:
        app.config.update(config_overrides)
    app.config["TEMPLATES_AUTO_RELOAD"] = True
    register_filters(app)

    logger = _configure_ui_logger(app.config["LOG_DIR"])
    logger.info("UI app initialized")

    if app.config["WRITE_PLOTLY_BUNDLE"] and not PLOTLY_VENDOR_PATH.exists():
        try:
            PLOTLY_VENDOR_PATH.parent.mkdir(parents=True, exist_ok=True)
            PLOTLY_VENDOR_PATH.write_text(get_plotlyjs(), encoding="utf-8")
            logger.info("Wrote local Plotly bundle: %s", PLOTLY_VENDOR_PATH)
        except OSError as exc:
            logger.warning("Failed to write local Plotly bundle: %s", exc)

    if ai_client is None:
        ai_client = build_ai_client(app.config)
    stock_service = StockDataService(ai_client=ai_client, workers=app.config["STOCK_FETCH_WORKERS"])
    opinion_service = OpinionService(ai_client=ai_client)
    users = UserStore()
    portfolios = PortfolioStore()

    if app.config["DEMO_USER_EMAIL"] and app.config["DEMO_USER_PASSWORD"]:
        try:
            users.register(
                app.config["DEMO_USER_NAME"],
                app.config["DEMO_USER_EMAIL"],
                app.config["DEMO_USER_PASSWORD"],
            )
        except RegistrationError as exc:
            logger.warning("Demo account not created: %s", exc)

    app.extensions["infinytix"] = {
        "stocks": stock_service,
        "opinions": opinion_service,
        "users": users,
        "portfolios": portfolios,
    }

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def _load_user(user_id: str):
        return users.get(user_id)

    @login_manager.unauthorized_handler
    def _unauthorized():
        if request.path.startswith("/api/"):
            return jsonify({"error": "Authentication required."}), 401
        target = request.full_path if request.query_string else request.path
        return redirect(url_for("login", next=target))

    def _session_watchlist() -> list[str]:
        tickers = session.get(WATCHLIST_SESSION_KEY)
        if not isinstance(tickers, list) or not tickers:
            tickers = list(DEFAULT_WATCHLIST)
        return tickers[:WATCHLIST_MAX_TICKERS]

    def _remember_ticker(ticker: str) -> None:
        tickers = _session_watchlist()
        if ticker in tickers or len(tickers) >= WATCHLIST_MAX_TICKERS:
            return
        session[WATCHLIST_SESSION_KEY] = [*tickers, ticker]

    def _plotly_script_url() -> str:
        return cache_busted_static_url(STATIC_DIR, PLOTLY_VENDOR_RELATIVE_PATH, url_for) or url_for(
            "static", filename=PLOTLY_VENDOR_RELATIVE_PATH
        )

    def _portfolio_view() -> PortfolioViewModel:
        portfolio = portfolios.for_user(current_user.id)
        return PortfolioViewModel(holdings=list(portfolio.holdings), summary=portfolio.summary())

    @app.context_processor
    def _inject_layout() -> dict[str, Any]:
        return {"active_page": request.endpoint}

    @app.route("/")
    @login_required
    def index() -> str:
        """Dashboard: index cards, selected stock chart with opinion, watchlist."""
        default_ticker = app.config["DEFAULT_TICKER"]
        requested = request.args.get("ticker", "")
        try:
            ticker = normalize_ticker(requested or default_ticker)
        except ValueError:
            flash(f"Data for {requested.strip()} is not available. Please select from the watchlist.", "danger")
            ticker = default_ticker

        selected_data = stock_service.get(ticker)
        if requested:
            _remember_ticker(selected_data.stock.ticker)

        selected = StockViewModel(
            data=selected_data,
            opinion=opinion_service.get(selected_data.stock.ticker, selected_data.stock.name),
            chart_html=build_price_chart(selected_data),
        )
        watchlist = stock_service.get_many(_session_watchlist())
        if selected_data.stock.ticker in watchlist:
            watchlist[selected_data.stock.ticker] = selected_data

        return render_template(
            "dashboard.html",
            indices=MARKET_INDICES,
            selected=selected,
            watchlist=[item.stock for item in watchlist.values()],
            plotly_script_url=_plotly_script_url(),
        )

    @app.route("/search")
    @login_required
    def search():
        """Header search box: jump to the dashboard for one ticker."""
        term = request.args.get("q", "").strip().upper()
        if not term:
            return redirect(url_for("index"))
        return redirect(url_for("index", ticker=term))

    @app.route("/portfolio", methods=["GET", "POST"])
    @login_required
    def portfolio():
        """Holdings table, summary cards and the add-stock form."""
        if request.method == "POST":
            try:
                holding = portfolios.add_holding(
                    current_user.id,
                    request.form.get("ticker"),
                    request.form.get("shares"),
                    request.form.get("price"),
                )
            except InvalidHoldingError as exc:
                flash(str(exc), "danger")
            else:
                logger.info("User %s added %s x %s", current_user.id, holding.shares, holding.ticker)
                shares_entered = request.form.get("shares", "").strip()
                flash(f"{shares_entered} shares of {holding.ticker} added to your portfolio.", "success")
            return redirect(url_for("portfolio"))

        return render_template("portfolio.html", portfolio=_portfolio_view())

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if current_user.is_authenticated:
            return redirect(url_for("index"))

        next_url = _safe_next_url(request.values.get("next"))
        if request.method == "POST":
            email = request.form.get("email", "")
            try:
                user = users.authenticate(email, request.form.get("password"))
            except AuthenticationError as exc:
                flash(str(exc), "danger")
                return render_template("login.html", email=email, next_url=next_url), 401
            login_user(user, remember=bool(request.form.get("remember")))
            logger.info("User %s signed in", user.email)
            return redirect(next_url or url_for("index"))

        return render_template("login.html", email="", next_url=next_url)

    @app.route("/register", methods=["GET", "POST"])
    def register():
        if current_user.is_authenticated:
            return redirect(url_for("index"))

        form = {"full_name": "", "email": ""}
        if request.method == "POST":
            form = {
                "full_name": request.form.get("full_name", ""),
                "email": request.form.get("email", ""),
            }
            try:
                user = users.register(form["full_name"], form["email"], request.form.get("password"))
            except RegistrationError as exc:
                flash(str(exc), "danger")
                return render_template("register.html", form=form), 400

            try:
                send_welcome_email(user.full_name, user.email)
            except Exception:
                logger.exception("Failed to send welcome email to %s", user.email)

            flash("Account Created! You have successfully created an account.", "success")
            return redirect(url_for("login"))

        return render_template("register.html", form=form)

    @app.route("/forgot-password", methods=["GET", "POST"])
    def forgot_password():
        if request.method == "POST":
            email = request.form.get("email", "").strip()
            if not is_valid_email(email):
                flash("Invalid email address", "danger")
                return render_template("forgot_password.html", email=email), 400
            if users.find_by_email(email) is not None:
                send_password_reset_email(email)
            flash(PASSWORD_RESET_MESSAGE, "info")
            return redirect(url_for("login"))

        return render_template("forgot_password.html", email="")

    @app.route("/logout")
    def logout():
        if current_user.is_authenticated:
            logger.info("User %s signed out", current_user.email)
        logout_user()
        session.pop(WATCHLIST_SESSION_KEY, None)
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/api/stock/<ticker>")
    @login_required
    def stock_api(ticker: str):
        """Quote and chart series for one ticker."""
        try:
            data = stock_service.get(ticker)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        return jsonify(serialize_stock_data(data))

    @app.route("/api/watchlist")
    @login_required
    def watchlist_api():
        """Quotes for several tickers fetched in parallel."""
        limit = parse_int(request.args.get("limit"), WATCHLIST_MAX_TICKERS, 1, WATCHLIST_MAX_TICKERS)
        requested = parse_ticker_list(request.args.get("tickers")) or _session_watchlist()

        tickers: list[str] = []
        errors: dict[str, str] = {}
        for raw_ticker in requested[:limit]:
            try:
                tickers.append(normalize_ticker(raw_ticker))
            except ValueError as exc:
                errors[raw_ticker] = str(exc)

        stocks = stock_service.get_many(tickers)
        return jsonify(
            {
                "tickers": tickers,
                "stocks": [serialize_stock_data(item)["stock"] for item in stocks.values()],
                "count": len(stocks),
                "errors": errors,
            }
        )

    @app.route("/api/opinion/<ticker>")
    @login_required
    def opinion_api(ticker: str):
        """Generated opinion for one ticker, or the static fallback text."""
        try:
            data = stock_service.get(ticker)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        opinion = opinion_service.get(data.stock.ticker, data.stock.name)
        return jsonify(opinion.to_dict())

    @app.route("/api/indices")
    @login_required
    def indices_api():
        return jsonify({"indices": [serialize_index(item) for item in MARKET_INDICES]})

    @app.route("/api/portfolio", methods=["GET", "POST"])
    @login_required
    def portfolio_api():
        """Holdings with derived gain/loss; POST adds a holding."""
        if request.method == "POST":
            body = request.get_json(silent=True)
            if not isinstance(body, dict):
                body = {}
            try:
                holding = portfolios.add_holding(
                    current_user.id,
                    body.get("ticker"),
                    body.get("shares"),
                    body.get("price"),
                )
            except InvalidHoldingError as exc:
                return jsonify({"error": str(exc)}), 400
            return jsonify({"holding": serialize_holding(holding)}), 201

        view = _portfolio_view()
        return jsonify(
            {
                "holdings": [serialize_holding(item) for item in view.holdings],
                "summary": serialize_summary(view.summary),
            }
        )

    def _log_unhandled_exception(sender: Flask, exception: Exception, **_: Any) -> None:
        logger.exception("Unhandled UI exception: %s", exception)

    got_request_exception.connect(_log_unhandled_exception, app)

    return app


app = create_app()


if __name__ == "__main__":
    app.run(host=settings.HOST, port=settings.PORT, debug=False)
