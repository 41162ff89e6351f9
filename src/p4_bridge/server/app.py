"""Flask application exposing the p4-bridge HTTP API.

Routes:
    GET  /                     browser UI (index.html from the static folder)
    GET  /api/p4/creds         saved credential status
    POST /api/p4/saveCreds     save a default credential (logs in if given a password)
    POST /api/p4/clearCreds    forget the default credential
    POST /api/p4/workspaces    {workspaces: [...]}
    POST /api/p4/changes       {changes: [...]}
    POST /api/p4/pending       {files: [...]}
    POST /api/p4/users         {users: [...]}

Every error is answered as `{"error": message}`.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from p4_bridge.api import operations
from p4_bridge.api.context import BridgeContext
from p4_bridge.api.exceptions import BridgeError
from p4_bridge.config.settings import Settings

logger = logging.getLogger(__name__)


def _request_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[BridgeContext] = None,
) -> Flask:
    """Create the Flask application.

    Args:
        settings: Application settings (default: loaded from the environment)
        context: Shared dependencies; built from `settings` when omitted

    Returns:
        Configured Flask app
    """
    if context is None:
        context = BridgeContext(settings=settings or Settings())
    settings = context.settings
    static_dir = settings.resolved_static_dir

    app = Flask(__name__, static_folder=str(static_dir), static_url_path="")
    app.config["BRIDGE_CONTEXT"] = context
    CORS(app, origins=settings.cors_origins, send_wildcard=True)

    @app.errorhandler(BridgeError)
    def handle_bridge_error(e: BridgeError):
        return jsonify({"error": str(e)}), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error in %s %s", request.method, request.path)
        return jsonify({"error": str(e) or e.__class__.__name__}), 500

    @app.get("/")
    def index():
        return send_from_directory(static_dir, "index.html")

    # ---------- credentials ----------

    @app.get("/api/p4/creds")
    def get_creds():
        return jsonify(operations.get_credentials_status(context))

    @app.post("/api/p4/saveCreds")
    def save_creds():
        operations.save_credentials(context, _request_body())
        return jsonify({"ok": True})

    @app.post("/api/p4/clearCreds")
    def clear_creds():
        operations.clear_credentials(context)
        return jsonify({"ok": True})

    # ---------- queries ----------

    @app.post("/api/p4/workspaces")
    def workspaces():
        result = operations.list_workspaces(context, _request_body())
        return jsonify({"workspaces": [w.model_dump() for w in result]})

    @app.post("/api/p4/changes")
    def changes():
        result = operations.list_changes(context, _request_body())
        return jsonify({"changes": [c.to_dict() for c in result]})

    @app.post("/api/p4/pending")
    def pending():
        result = operations.list_pending(context, _request_body())
        return jsonify({"files": [f.to_dict() for f in result]})

    @app.post("/api/p4/users")
    def users():
        result = operations.list_users(context, _request_body())
        return jsonify({"users": [u.to_dict() for u in result]})

    return app
