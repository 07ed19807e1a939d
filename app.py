# app.py
import logging
from pathlib import Path

from flask import Flask, request, jsonify, abort, make_response
from flask_login import (
    LoginManager, UserMixin, login_user, logout_user,
    login_required, current_user
)
from sqlalchemy.orm import selectinload
from werkzeug.security import check_password_hash

from config import Config
from errors import RenderFailure
from models import Base, make_engine, make_session_factory, User, Invoice
from renderer import InvoiceRenderer, pdf_filename

logger = logging.getLogger(__name__)

login_manager = LoginManager()


# -----------------------------
# Flask-Login user wrapper
# -----------------------------
class AppUser(UserMixin):
    def __init__(self, user_id: int, username: str):
        self.id = str(user_id)
        self.username = username


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify({"error": "Unauthorized"}), 401


# -----------------------------
# Helpers
# -----------------------------
def _current_user_id_int() -> int:
    try:
        return int(current_user.get_id())
    except (TypeError, ValueError):
        return -1


def _invoice_owned_or_404(session, invoice_id: int) -> Invoice:
    inv = (
        session.query(Invoice)
        .options(selectinload(Invoice.client), selectinload(Invoice.owner))
        .filter(Invoice.id == invoice_id, Invoice.user_id == _current_user_id_int())
        .first()
    )
    if not inv:
        abort(404)
    return inv


def _pdf_response(data: bytes, filename: str, disposition: str):
    resp = make_response(data)
    resp.headers["Content-Type"] = "application/pdf"
    resp.headers["Content-Disposition"] = f'{disposition}; filename="{filename}"'
    return resp


def configure_logging(level: str = Config.LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# -----------------------------
# App factory
# -----------------------------
def create_app(overrides: dict | None = None):
    configure_logging()

    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    db_url = app.config["SQLALCHEMY_DATABASE_URI"]
    if db_url.startswith("sqlite:///") and ":memory:" not in db_url:
        Path(db_url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

    login_manager.init_app(app)

    engine = make_engine(db_url, echo=app.config.get("SQLALCHEMY_ECHO", False))
    Base.metadata.create_all(engine)
    SessionLocal = make_session_factory(engine)
    app.extensions["session_factory"] = SessionLocal

    renderer = InvoiceRenderer(invariant=app.config.get("PDF_INVARIANT"))

    def db_session():
        return SessionLocal()

    @login_manager.user_loader
    def load_user(user_id: str):
        try:
            uid = int(user_id)
        except (TypeError, ValueError):
            return None
        with db_session() as s:
            u = s.get(User, uid)
            if not u:
                return None
            return AppUser(u.id, u.username)

    @app.errorhandler(RenderFailure)
    def _render_failed(e: RenderFailure):
        logger.error("PDF generation error: %s", e, exc_info=e.__cause__)
        return jsonify({"error": "Failed to generate PDF"}), 500

    # -----------------------------
    # Auth routes
    # -----------------------------
    @app.route("/login", methods=["POST"])
    def login():
        payload = request.get_json(silent=True) or request.form
        username = (payload.get("username") or "").strip()
        password = payload.get("password") or ""
        with db_session() as s:
            u = s.query(User).filter(User.username == username).first()
            if u and check_password_hash(u.password_hash, password):
                login_user(AppUser(u.id, u.username))
                return jsonify({"id": u.id, "username": u.username})

        return jsonify({"error": "Invalid username or password"}), 401

    @app.route("/logout")
    @login_required
    def logout():
        logout_user()
        return jsonify({"ok": True})

    # -----------------------------
    # PDF routes (scoped)
    # -----------------------------
    @app.route("/invoices/<int:invoice_id>/pdf")
    @login_required
    def invoice_pdf(invoice_id):
        with db_session() as s:
            inv = _invoice_owned_or_404(s, invoice_id)
            document = inv.to_document()

        data = renderer.render(document)
        return _pdf_response(data, pdf_filename(document), "attachment")

    @app.route("/invoices/preview", methods=["POST"])
    @login_required
    def invoice_preview():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "Expected a JSON invoice body"}), 400

        if not payload.get("company") and not payload.get("companyName"):
            with db_session() as s:
                u = s.get(User, _current_user_id_int())
                if u:
                    payload = {**payload, "company": u.company_profile()}

        data = renderer.render(payload)
        return _pdf_response(data, pdf_filename(payload, preview=True), "inline")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
