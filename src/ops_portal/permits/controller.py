from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import now_local
from ..common.validators import require_date
from ..common.web import current_role, domain_error_response, fail, login_required, roles_required, write_response
from ..core.constants import MONTH_FORMAT
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from .export import PermitRecapExporter, build_permit_document, is_printable
from .model import LeavePermit
from .state_machine import status_label


def _permit_to_dict(p: LeavePermit, *, include_signature: bool = False) -> dict:
    doc = p.to_document(include_signature=include_signature)
    doc["statusLabel"] = status_label(p.status)
    doc["printable"] = is_printable(p)
    return doc


def register(app: Flask, container: Container) -> None:
    service = container.permit_service

    def _month_arg() -> str:
        return (request.args.get("month") or now_local().strftime(MONTH_FORMAT)).strip()

    def _actor_name() -> str:
        return session.get("name") or session.get("email") or ""

    @app.route("/api/permits", methods=["POST"], endpoint="submit_permit")
    @roles_required(Role.EMPLOYEE, Role.RECEPTIONIST, Role.SECURITY)
    def submit_permit():
        data = request.get_json(silent=True) or request.form
        try:
            handle = service.submit(
                current_role=current_role(),
                employee_id=data.get("employeeId", ""),
                permit_date=data.get("date", ""),
                leave_time=data.get("leaveTime", ""),
                security_on_duty=data.get("securityOnDuty", ""),
                purpose=data.get("purpose", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Pengajuan izin keluar telah berhasil dibuat.")

    @app.route("/api/permits/can-submit", methods=["GET"], endpoint="can_submit_permit")
    @login_required
    def can_submit_permit():
        try:
            day = require_date(request.args.get("date", ""), "Tanggal")
        except DomainError as e:
            return domain_error_response(e)
        employee_id = request.args.get("employee_id", "")
        return jsonify({"employeeId": employee_id, "date": day.isoformat(), "enabled": service.can_submit(employee_id, day)})

    @app.route("/api/permits/mine", methods=["GET"], endpoint="my_permits")
    @login_required
    def my_permits():
        employee_id = (request.args.get("employee_id") or "").strip()
        if not employee_id:
            return fail("Pegawai wajib diisi", 400)
        return jsonify({"permits": [_permit_to_dict(p) for p in service.my_permits(employee_id)]})

    @app.route("/api/admin/permits/queue", methods=["GET"], endpoint="admin_permit_queue")
    @roles_required(Role.ADMIN)
    def admin_permit_queue():
        queues = service.queues()
        return jsonify({"permits": [_permit_to_dict(p) for p in queues.admin]})

    @app.route("/api/admin/permits/<int:permit_id>/<decision>", methods=["POST"], endpoint="decide_permit")
    @roles_required(Role.ADMIN)
    def decide_permit(permit_id: int, decision: str):
        try:
            handle = service.decide(
                decision,
                current_role=current_role(),
                permit_id=permit_id,
                actor_name=_actor_name(),
            )
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Status izin telah diperbarui.")

    @app.route("/api/security/permits/queues", methods=["GET"], endpoint="security_permit_queues")
    @roles_required(Role.SECURITY)
    def security_permit_queues():
        queues = service.queues()
        return jsonify(
            {
                "signOut": [_permit_to_dict(p) for p in queues.sign_out],
                "returning": [_permit_to_dict(p) for p in queues.returning],
            }
        )

    @app.route("/api/security/permits/<int:permit_id>/sign-out", methods=["POST"], endpoint="sign_out_permit")
    @roles_required(Role.SECURITY)
    def sign_out_permit(permit_id: int):
        data = request.get_json(silent=True) or request.form
        try:
            handle = service.sign_out(
                current_role=current_role(),
                permit_id=permit_id,
                signature=data.get("signature", ""),
                actual_time=data.get("actualLeaveTime") or None,
            )
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Pegawai telah dikonfirmasi keluar.")

    @app.route("/api/security/permits/<int:permit_id>/return", methods=["POST"], endpoint="return_permit")
    @roles_required(Role.SECURITY)
    def return_permit(permit_id: int):
        data = request.get_json(silent=True) or request.form
        try:
            handle = service.confirm_return(
                current_role=current_role(),
                permit_id=permit_id,
                actual_time=data.get("actualReturnTime") or None,
            )
        except DomainError as e:
            return domain_error_response(e)
        return write_response(handle, message="Pegawai telah dikonfirmasi kembali ke area kerja.")

    def _recap(month: str) -> PermitRecapExporter:
        return PermitRecapExporter(service.recap(month), month)

    @app.route("/api/permits/recap", methods=["GET"], endpoint="permit_recap")
    @roles_required(Role.ADMIN)
    def permit_recap():
        month = _month_arg()
        try:
            permits = service.recap(month)
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"month": month, "permits": [_permit_to_dict(p) for p in permits]})

    @app.route("/api/permits/recap.csv", methods=["GET"], endpoint="permit_recap_csv")
    @roles_required(Role.ADMIN)
    def permit_recap_csv():
        try:
            exporter = _recap(_month_arg())
            body = exporter.to_csv()
        except DomainError as e:
            return domain_error_response(e)
        return app.response_class(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={exporter.filename_stem}.csv"},
        )

    @app.route("/api/permits/recap.xlsx", methods=["GET"], endpoint="permit_recap_xlsx")
    @roles_required(Role.ADMIN)
    def permit_recap_xlsx():
        try:
            exporter = _recap(_month_arg())
            body = exporter.to_excel()
        except DomainError as e:
            return domain_error_response(e)
        return send_file(
            io.BytesIO(body),
            download_name=f"{exporter.filename_stem}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route("/api/permits/<int:permit_id>/print", methods=["GET"], endpoint="print_permit")
    @login_required
    def print_permit(permit_id: int):
        try:
            doc = build_permit_document(
                service.get(permit_id),
                header=app.config.get("DOCUMENT_HEADER", ()),
                approver_title=app.config.get("DOCUMENT_APPROVER_TITLE", "Manager"),
                approver_name=app.config.get("DOCUMENT_APPROVER_NAME", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        if request.args.get("format") == "text":
            return app.response_class(
                doc.render_text(),
                mimetype="text/plain",
                headers={"Content-Disposition": f"attachment; filename=\"{doc.filename}.txt\""},
            )
        return jsonify({"document": doc.to_dict()})
