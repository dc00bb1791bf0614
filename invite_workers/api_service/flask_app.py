from __future__ import annotations

import logging
import time
from datetime import datetime
from uuid import uuid4

from flask import Flask, g, jsonify, request

from invitelib.config import load_config, require_valid
from invitelib.errors import InviteSheetError
from invitelib.invite_service import InviteSheetService
from invitelib.logs import setup_logging
from invitelib.sheet_contract import field
from invitelib.sheets import GoogleSheetsStore

log = setup_logging("invite-api")

app = Flask(__name__)

# Sheet timestamp format for status changes made through the UI
STATUS_TS_FORMAT = "%Y-%m-%d %H:%M:%S"

# Frontend log levels -> python logging
FRONTEND_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Column -> JSON key for the invites listing
INVITE_FIELDS = (
    ("name", 1),             # B
    ("role", 2),             # C
    ("email", 3),            # D
    ("company", 5),          # F
    ("yearsExperience", 6),  # G
    ("reasons", 7),          # H
    ("source", 8),           # I
)


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _service() -> InviteSheetService:
    """
    Injected service (tests) or one built from env on first use.
    """
    svc = app.config.get("INVITE_SERVICE")
    if svc is None:
        cfg = require_valid(load_config())
        svc = InviteSheetService(GoogleSheetsStore.from_config(cfg), cfg.sheet_name)
        app.config["INVITE_SERVICE"] = svc
    return svc


def _str(v) -> str:
    return v if isinstance(v, str) else ""


def row_to_invite(row) -> dict:
    return {key: _str(field(row, idx)) for key, idx in INVITE_FIELDS}


def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"] = "*"
    return resp


# ------------------------------------------------------------
# Request logging
# ------------------------------------------------------------
@app.before_request
def _start_request():
    g.request_id = request.headers.get("X-Request-ID") or str(uuid4())
    g.started = time.monotonic()
    if request.path != "/health":
        log.info("request started request_id=%s method=%s path=%s remote_addr=%s",
                 g.request_id, request.method, request.path, request.remote_addr)


@app.after_request
def _finish_request(resp):
    rid = getattr(g, "request_id", "")
    resp.headers["X-Request-ID"] = rid
    if request.path != "/health":
        ms = (time.monotonic() - getattr(g, "started", time.monotonic())) * 1000
        log.info("request completed request_id=%s status=%d size=%s duration_ms=%.1f",
                 rid, resp.status_code, resp.calculate_content_length(), ms)
    return resp


# ------------------------------------------------------------
# Routes
# ------------------------------------------------------------
@app.route("/api/invites", methods=["GET"])
def get_outstanding_invites():
    try:
        rows = _service().get_sheet_data()
    except InviteSheetError as e:
        log.error("failed to get sheet data request_id=%s error=%s", g.request_id, e)
        return jsonify({"error": "Failed to get sheet data"}), 500

    invites = [row_to_invite(r) for r in rows if len(r) >= 9]
    log.debug("retrieved invites count=%d", len(invites))
    return _cors(jsonify(invites)), 200


@app.route("/api/invites", methods=["PATCH"])
def update_invite_status():
    body = request.get_json(silent=True)
    emails = body.get("emails") if isinstance(body, dict) else None
    status = body.get("status") if isinstance(body, dict) else None
    if not isinstance(emails, list) or not all(isinstance(e, str) for e in emails) or not isinstance(status, str):
        log.warning("invalid request body request_id=%s", g.request_id)
        return jsonify({"error": "Invalid request body"}), 400

    log.info("updating invite statuses email_count=%d status=%s", len(emails), status)

    timestamp = datetime.now().strftime(STATUS_TS_FORMAT)
    try:
        _service().update_invite_status(emails, status, timestamp)
    except InviteSheetError as e:
        log.error("failed to update invite statuses request_id=%s error=%s", g.request_id, e)
        return jsonify({"error": "Failed to update invite statuses"}), 500

    log.info("invite statuses updated email_count=%d status=%s", len(emails), status)
    return _cors(jsonify({"status": "success"})), 200


@app.route("/api/logs", methods=["POST"])
def frontend_logs():
    entry = request.get_json(silent=True)
    if not isinstance(entry, dict) or not isinstance(entry.get("message"), str):
        return jsonify({"error": "Invalid log entry"}), 400

    level = FRONTEND_LEVELS.get(str(entry.get("level", "info")).lower(), logging.INFO)
    context = entry.get("context") if isinstance(entry.get("context"), dict) else {}
    log.log(level, "frontend: %s source=frontend context=%s", entry["message"], context)
    return _cors(app.response_class(status=204))


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"}), 200


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=load_config().port)
