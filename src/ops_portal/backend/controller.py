from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import roles_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "errorListeners": container.channel.listener_count})

    @app.route("/api/diagnostics/errors", methods=["GET"], endpoint="diagnostics_errors")
    @roles_required(Role.ADMIN)
    def diagnostics_errors():
        events = container.error_buffer.snapshot()
        return jsonify({"count": len(events), "errors": [e.to_dict() for e in events]})
