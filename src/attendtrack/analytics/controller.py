from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.guards import current_actor, professor_required
from ..container import Container
from ..core.constants import LOW_ATTENDANCE_THRESHOLD
from ..core.exceptions import ValidationError

_SEED_KEY = "analytics_seed"


def register(app: Flask, container: Container) -> None:
    def _summary(*, reuse: bool):
        """Each opening of the panel draws a new roster; ``reuse`` keeps the one on screen."""
        if not reuse or _SEED_KEY not in session:
            session[_SEED_KEY] = container.analytics_service.new_seed()
        courses = container.course_service.list_for_professor(current_actor().user_id)
        return container.analytics_service.generate(courses, seed=session[_SEED_KEY])

    @app.route("/professor/analytics", endpoint="analytics")
    @professor_required
    def analytics():
        summary = _summary(reuse=request.args.get("keep") == "1")
        return render_template(
            "professor/analytics.html",
            summary=summary,
            threshold=LOW_ATTENDANCE_THRESHOLD,
            active_page="analytics",
        )

    @app.route("/api/professor/analytics", endpoint="api_analytics")
    @professor_required
    def api_analytics():
        summary = _summary(reuse=request.args.get("keep") == "1")
        return jsonify({"success": True, **summary.to_dict()})

    @app.route("/professor/analytics/send-warnings", methods=["POST"], endpoint="send_warnings")
    @professor_required
    def send_warnings():
        summary = _summary(reuse=True)
        try:
            sent = container.analytics_service.send_warning_emails(summary.students)
            message = f"Sent attendance warnings to {sent} student(s)."
            if request.is_json:
                return jsonify({"success": True, "title": "Warning emails sent!", "message": message, "sent": sent})
            flash(f"Warning emails sent! {message}", "success")
        except ValidationError as e:
            if request.is_json:
                return jsonify({"success": False, "title": e.title, "message": str(e)}), 400
            flash(f"{e.title}: {e}", "danger")
        return redirect(url_for("analytics", keep=1))
