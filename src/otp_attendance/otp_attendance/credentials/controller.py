from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.security import make_admin_required
from ..container import Container
from .qr import render_qr_png


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(lambda: container.admin_password_hash)

    @app.route("/api/totp/remaining", methods=["GET"], endpoint="totp_remaining")
    def totp_remaining():
        return jsonify({"seconds_remaining": container.totp.time_remaining()})

    @app.route("/admin/totp/qr", methods=["GET"], endpoint="admin_totp_qr")
    @admin_required
    def admin_totp_qr():
        """Provisioning QR code for authenticator apps."""
        account = request.args.get("account", "Employee")
        uri = container.totp.key_uri(account, container.totp_issuer)
        return send_file(render_qr_png(uri), mimetype="image/png")
