from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.guards import current_actor, login_required
from ..container import Container
from ..core.enums import AppRole
from ..core.exceptions import AuthenticationError, DomainError, ValidationError

logger = logging.getLogger(__name__)


def _home_endpoint() -> str:
    roles = set(session.get("roles", []))
    if roles & {AppRole.PROFESSOR.value, AppRole.ADMIN.value}:
        return "professor_dashboard"
    return "student_dashboard"


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    def _start_session(s_user, *, remember: bool) -> None:
        session.clear()
        session.permanent = remember
        session["user_id"] = s_user.user_id
        session["email"] = s_user.email
        session["name"] = s_user.full_name or s_user.email
        session["roles"] = list(s_user.roles)

    @app.route("/", endpoint="index")
    def index():
        if "user_id" not in session:
            return render_template("index.html")
        return redirect(url_for(_home_endpoint()))

    @app.route("/auth", methods=["GET", "POST"], endpoint="auth")
    def auth():
        if "user_id" in session:
            return redirect(url_for(_home_endpoint()))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                s_user = container.auth_service.authenticate(email, password)
                _start_session(s_user, remember=bool(request.form.get("remember_me")))
                flash("Signed in successfully!", "success")
                return redirect(url_for(_home_endpoint()))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("sign in failed")
                flash("Something went wrong while signing in", "danger")

        return render_template("auth.html", mode=request.args.get("mode", "login"))

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        try:
            container.auth_service.sign_up(
                email=email,
                password=password,
                full_name=request.form.get("full_name", ""),
                role=request.form.get("role", AppRole.STUDENT.value),
            )
            s_user = container.auth_service.authenticate(email, password)
            _start_session(s_user, remember=False)
            flash("Account created! Welcome to AttendTrack.", "success")
            return redirect(url_for(_home_endpoint()))
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("sign up failed")
            flash("Something went wrong while creating your account", "danger")

        return redirect(url_for("auth", mode="signup"))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("index"))

    @app.route("/profile", methods=["GET", "POST"], endpoint="profile")
    @login_required
    def profile():
        actor = current_actor()
        if request.method == "POST":
            try:
                full_name = request.form.get("full_name", "")
                container.profile_service.update_profile(actor, profile_id=actor.user_id, full_name=full_name)
                session["name"] = full_name.strip() or session.get("email")
                flash("Profile updated.", "success")
                return redirect(url_for("profile"))
            except DomainError as e:
                flash(str(e), "danger")

        return render_template(
            "profile.html",
            profile=container.profile_service.get_profile(actor.user_id),
            roles=sorted(r.value for r in container.role_service.roles_for(actor, actor.user_id)),
        )
