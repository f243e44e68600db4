from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.validators import require_date, require_non_empty
from ..common.web import current_role, domain_error_response, login_required, roles_required, write_response
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _date_arg():
        raw = request.args.get("date")
        if not raw:
            return now_local().date()
        return require_date(raw, "Tanggal")

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        data = request.get_json(silent=True) or request.form
        try:
            employee_id = require_non_empty(data.get("employeeId", ""), "Pegawai")
            handle = service.clock_in(employee_id=employee_id, notes=data.get("notes", ""))
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Absen masuk berhasil dicatat.")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        data = request.get_json(silent=True) or request.form
        try:
            employee_id = require_non_empty(data.get("employeeId", ""), "Pegawai")
            handle = service.clock_out(employee_id=employee_id, notes=data.get("notes", ""))
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Absen pulang berhasil dicatat.")

    @app.route("/api/attendance/roster", methods=["GET"], endpoint="attendance_roster")
    @login_required
    def attendance_roster():
        try:
            work_date = _date_arg()
        except DomainError as e:
            return domain_error_response(e)
        roster = service.daily_roster(work_date)
        return jsonify({"date": work_date.isoformat(), "records": [r.to_document() for r in roster]})

    @app.route("/api/attendance/clocked-in", methods=["GET"], endpoint="attendance_clocked_in")
    @login_required
    def attendance_clocked_in():
        try:
            employee_id = require_non_empty(request.args.get("employee_id", ""), "Pegawai")
            work_date = _date_arg()
        except DomainError as e:
            return domain_error_response(e)
        return jsonify(
            {
                "employeeId": employee_id,
                "date": work_date.isoformat(),
                "clockedIn": service.has_clocked_in(employee_id, work_date),
            }
        )

    @app.route("/api/admin/attendance/<int:record_id>", methods=["POST"], endpoint="admin_update_attendance")
    @roles_required(Role.ADMIN)
    def admin_update_attendance(record_id: int):
        data = request.get_json(silent=True) or request.form
        try:
            handle = service.admin_update(
                current_role=current_role(),
                record_id=record_id,
                clock_in=data.get("clockIn", ""),
                clock_out=data.get("clockOut", ""),
                leave_out=data.get("leaveOut", ""),
                return_in=data.get("returnIn", ""),
                notes=data.get("notes", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Data absensi berhasil diperbarui.")
