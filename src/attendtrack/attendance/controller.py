from __future__ import annotations

import io
import logging
from datetime import datetime

from flask import Flask, flash, jsonify, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import parse_iso_date
from ..common.guards import api_login_required, current_actor, login_required, professor_required, render_forbidden
from ..container import Container
from ..core.constants import SCAN_BOX_SIZE, SCAN_FPS
from ..core.exceptions import (
    AlreadyCheckedInError,
    AuthorizationError,
    DomainError,
    NotFoundError,
)
from .export import report_csv, report_xlsx
from .model import GeoLocation

logger = logging.getLogger(__name__)


def _status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, AlreadyCheckedInError):
        return 409
    if isinstance(error, AuthorizationError):
        return 403
    return 400


def _error_json(error: DomainError):
    return jsonify({"success": False, "title": error.title, "message": str(error)}), _status_for(error)


def _success_json(result):
    return jsonify(
        {
            "success": True,
            "title": "Check-in successful!",
            "message": result.message,
            "record_id": result.record_id,
            "course": {
                "id": result.course.course_id,
                "name": result.course.name,
                "code": result.course.code,
            },
            "checked_in_at": result.checked_in_at.isoformat(),
            "location_captured": result.location is not None,
        }
    ), 200


def _date_arg(name: str):
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    @app.route("/student", endpoint="student_dashboard")
    @login_required
    def student_dashboard():
        history = container.attendance_service.history_for_student(current_actor())
        return render_template("student/dashboard.html", history=history, active_page="student")

    @app.route("/scan", endpoint="scan")
    @login_required
    def scan():
        return render_template("student/scan.html", fps=SCAN_FPS, box_size=SCAN_BOX_SIZE, active_page="scan")

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    @api_login_required
    def api_checkin():
        """JSON body: {"qr_data": "...", "location": {"lat": .., "lng": .., "accuracy": ..}}"""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        try:
            location = GeoLocation.from_mapping(data.get("location"))
            result = container.checkin_service.check_in(current_actor(), data.get("qr_data"), location=location)
            return _success_json(result)
        except DomainError as e:
            return _error_json(e)
        except Exception:
            logger.exception("check-in failed")
            return jsonify(
                {
                    "success": False,
                    "title": "Check-in failed",
                    "message": "An error occurred while processing your check-in.",
                }
            ), 500

    @app.route("/api/checkin/image", methods=["POST"], endpoint="api_checkin_image")
    @api_login_required
    def api_checkin_image():
        """Multipart upload: ``image`` file plus optional lat/lng/accuracy fields."""
        if "image" not in request.files:
            return jsonify({"success": False, "title": "Invalid QR Code", "message": "Missing image file"}), 400

        try:
            location = GeoLocation.from_mapping(request.form)
            result = container.checkin_service.check_in_image(
                current_actor(), request.files["image"].stream, location=location
            )
            return _success_json(result)
        except DomainError as e:
            return _error_json(e)
        except Exception:
            logger.exception("image check-in failed")
            return jsonify(
                {
                    "success": False,
                    "title": "Check-in failed",
                    "message": "An error occurred while processing your check-in.",
                }
            ), 500

    @app.route("/professor/courses/<course_id>/attendance", endpoint="course_attendance")
    @professor_required
    def course_attendance(course_id: str):
        actor = current_actor()
        try:
            course = container.course_service.require_manageable(actor, course_id)
            start, end = _date_arg("start"), _date_arg("end")
            report = container.attendance_service.course_report(actor, course_id, start=start, end=end)
        except AuthorizationError:
            return render_forbidden()
        except ValueError:
            flash("Dates must be in YYYY-MM-DD format", "warning")
            return redirect(url_for("course_attendance", course_id=course_id))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("professor_dashboard"))

        return render_template(
            "professor/attendance.html",
            course=course,
            report=report,
            start=request.args.get("start", ""),
            end=request.args.get("end", ""),
            active_page="professor",
        )

    def _export(course_id: str, fmt: str):
        actor = current_actor()
        try:
            course = container.course_service.require_manageable(actor, course_id)
            report = container.attendance_service.course_report(
                actor, course_id, start=_date_arg("start"), end=_date_arg("end")
            )
        except AuthorizationError:
            return render_forbidden()
        except ValueError:
            flash("Dates must be in YYYY-MM-DD format", "warning")
            return redirect(url_for("course_attendance", course_id=course_id))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("professor_dashboard"))

        filename = f"{course.code}-attendance.{fmt}"
        if fmt == "csv":
            body, mimetype = report_csv(report), "text/csv"
        else:
            body = report_xlsx(report)
            mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        return send_file(io.BytesIO(body), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/professor/courses/<course_id>/attendance.csv", endpoint="course_attendance_csv")
    @professor_required
    def course_attendance_csv(course_id: str):
        return _export(course_id, "csv")

    @app.route("/professor/courses/<course_id>/attendance.xlsx", endpoint="course_attendance_xlsx")
    @professor_required
    def course_attendance_xlsx(course_id: str):
        return _export(course_id, "xlsx")

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="api_update_attendance")
    @api_login_required
    def api_update_attendance(record_id: str):
        """Manual correction by a professor: new check-in time and/or location."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        try:
            checked_in_at = datetime.fromisoformat(data["checked_in_at"]) if data.get("checked_in_at") else None
            location = GeoLocation.from_mapping(data.get("location"))
            container.attendance_service.update_record(
                current_actor(),
                record_id,
                checked_in_at=checked_in_at,
                location=location,
                clear_location=bool(data.get("clear_location")),
            )
            return jsonify({"success": True, "title": "Attendance updated", "message": "Record saved."}), 200
        except (TypeError, ValueError):
            return jsonify({"success": False, "title": "Invalid input", "message": "checked_in_at must be ISO-8601"}), 400
        except DomainError as e:
            return _error_json(e)
