from __future__ import annotations

import io
import logging

from flask import Flask, abort, flash, jsonify, redirect, render_template, request, send_file, url_for

from ..common.guards import admin_required, current_actor, professor_required, render_forbidden
from ..container import Container
from ..core.constants import COURSE_YEAR_MAX, COURSE_YEAR_MIN
from ..core.exceptions import AuthorizationError, CourseNotFoundError, DomainError, ValidationError
from ..qr.codec import render_png, render_svg
from ..qr.payload import build_payload, download_filename

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _load_manageable(course_id: str):
        try:
            return container.course_service.require_manageable(current_actor(), course_id)
        except CourseNotFoundError:
            abort(404)

    @app.route("/professor", endpoint="professor_dashboard")
    @professor_required
    def professor_dashboard():
        actor = current_actor()
        courses = container.course_service.list_for_professor(actor.user_id)
        return render_template("professor/dashboard.html", courses=courses, active_page="professor")

    @app.route("/professor/create-course", methods=["GET", "POST"], endpoint="create_course")
    @professor_required
    def create_course():
        form = {}
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                course = container.course_service.create_course(
                    current_actor(),
                    name=form.get("name"),
                    code=form.get("code"),
                    semester=form.get("semester"),
                    year=form.get("year"),
                )
                flash(f"Course created! {course.name} has been successfully created.", "success")
                return redirect(url_for("professor_dashboard"))
            except (ValidationError, AuthorizationError) as e:
                flash(f"Failed to create course: {e}", "danger")
            except Exception:
                logger.exception("course creation failed")
                flash("Failed to create course. Please check your input and try again.", "danger")

        return render_template(
            "professor/course_form.html",
            form=form,
            course=None,
            year_min=COURSE_YEAR_MIN,
            year_max=COURSE_YEAR_MAX,
            active_page="professor",
        )

    @app.route("/professor/courses/<course_id>/edit", methods=["GET", "POST"], endpoint="edit_course")
    @professor_required
    def edit_course(course_id: str):
        try:
            course = _load_manageable(course_id)
        except AuthorizationError:
            return render_forbidden()

        form = {
            "name": course.name,
            "code": course.code,
            "semester": course.semester or "",
            "year": course.year or "",
        }
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                container.course_service.update_course(
                    current_actor(),
                    course_id,
                    name=form.get("name"),
                    code=form.get("code"),
                    semester=form.get("semester"),
                    year=form.get("year"),
                )
                flash("Course updated.", "success")
                return redirect(url_for("professor_dashboard"))
            except DomainError as e:
                flash(str(e), "danger")

        return render_template(
            "professor/course_form.html",
            form=form,
            course=course,
            year_min=COURSE_YEAR_MIN,
            year_max=COURSE_YEAR_MAX,
            active_page="professor",
        )

    @app.route("/admin/courses/<course_id>/delete", methods=["POST"], endpoint="delete_course")
    @admin_required
    def delete_course(course_id: str):
        try:
            container.course_service.delete_course(current_actor(), course_id)
            flash("Course deleted.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(url_for("professor_dashboard"))

    # ===== QR CODE ENDPOINTS =====

    @app.route("/professor/courses/<course_id>/qr", endpoint="course_qr")
    @professor_required
    def course_qr(course_id: str):
        """Page to display the course QR code in class."""
        try:
            course = _load_manageable(course_id)
            image_url = url_for("course_qr_png", course_id=course_id, _external=True)
            container.course_service.set_qr_code_url(current_actor(), course_id, image_url)
        except AuthorizationError:
            return render_forbidden()

        payload = build_payload(course)
        return render_template("professor/qr.html", course=course, qr_data=payload.to_json(), active_page="professor")

    @app.route("/professor/courses/<course_id>/qr.png", endpoint="course_qr_png")
    @professor_required
    def course_qr_png(course_id: str):
        try:
            course = _load_manageable(course_id)
        except AuthorizationError:
            return render_forbidden()

        png = render_png(build_payload(course).to_json())
        download = request.args.get("download") == "1"
        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            as_attachment=download,
            download_name=download_filename(course.code),
        )

    @app.route("/professor/courses/<course_id>/qr.svg", endpoint="course_qr_svg")
    @professor_required
    def course_qr_svg(course_id: str):
        try:
            course = _load_manageable(course_id)
        except AuthorizationError:
            return render_forbidden()

        svg = render_svg(build_payload(course).to_json())
        return app.response_class(svg, mimetype="image/svg+xml")

    @app.route("/professor/courses/<course_id>/qr-data", endpoint="course_qr_data")
    @professor_required
    def course_qr_data(course_id: str):
        """Raw payload for the 'Copy Data' button."""
        try:
            course = _load_manageable(course_id)
        except AuthorizationError:
            return jsonify({"success": False, "message": "You can only manage your own courses"}), 403

        payload = build_payload(course)
        return jsonify({"success": True, "qr_data": payload.to_json()})
