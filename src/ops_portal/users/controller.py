from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import current_role, domain_error_response, fail, login_required, roles_required
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, DomainError
from ..container import Container


def _user_to_dict(u) -> dict:
    return {
        "uid": u.uid,
        "email": u.email,
        "name": u.full_name,
        "role": u.role.value,
        "status": u.status.value,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return fail(str(e), 401)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["uid"] = s_user.uid
        session["email"] = s_user.email
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        app.logger.info("User %s signed in as %s", s_user.uid, s_user.role.value)
        return jsonify({"success": True, "user": s_user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Berhasil keluar"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "uid": session["uid"],
                "email": session.get("email"),
                "name": session.get("name"),
                "role": session.get("role"),
            }
        )

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @roles_required(Role.ADMIN)
    def admin_users():
        users = container.user_service.list_users(current_role=current_role())
        return jsonify({"users": [_user_to_dict(u) for u in users]})

    @app.route("/api/admin/users", methods=["POST"], endpoint="add_user")
    @roles_required(Role.ADMIN)
    def add_user():
        data = request.get_json(silent=True) or {}
        try:
            try:
                role = Role(data.get("role", Role.EMPLOYEE.value))
            except ValueError:
                return fail("Peran tidak valid", 400)
            uid = container.user_service.create_account(
                current_role=current_role(),
                email=data.get("email", ""),
                full_name=data.get("name", ""),
                password=data.get("password", ""),
                role=role,
                approved=bool(data.get("approved")),
            )
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "uid": uid}), 201

    @app.route("/api/admin/users/<uid>/role", methods=["POST"], endpoint="set_user_role")
    @roles_required(Role.ADMIN)
    def set_user_role(uid: str):
        data = request.get_json(silent=True) or {}
        try:
            role = Role(data.get("role", ""))
        except ValueError:
            return fail("Peran tidak valid", 400)
        try:
            container.user_service.set_role(current_role=current_role(), uid=uid, role=role)
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "message": f"Peran pengguna diubah menjadi {role.value}"})

    @app.route("/api/admin/users/<uid>/status", methods=["POST"], endpoint="set_user_status")
    @roles_required(Role.ADMIN)
    def set_user_status(uid: str):
        data = request.get_json(silent=True) or {}
        try:
            status = AccountStatus(data.get("status", ""))
        except ValueError:
            return fail("Status tidak valid", 400)
        try:
            container.user_service.set_status(current_role=current_role(), uid=uid, status=status)
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "message": f"Status pengguna diubah menjadi {status.value}"})

    @app.route("/api/employees", methods=["GET"], endpoint="employees")
    @login_required
    def employees():
        return jsonify(
            {
                "employees": [
                    {"id": e.employee_id, "name": e.name} for e in container.user_service.list_employees()
                ],
                "security": [
                    {"id": e.employee_id, "name": e.name}
                    for e in container.user_service.list_security_personnel()
                ],
            }
        )
