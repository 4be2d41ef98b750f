from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import flash, jsonify, redirect, render_template, session, url_for

from ..core.enums import AppRole
from ..core.policies import Actor


def current_actor() -> Optional[Actor]:
    if "user_id" not in session:
        return None
    roles = frozenset(AppRole(r) for r in session.get("roles", []))
    return Actor(user_id=str(session["user_id"]), roles=roles)


def current_user_view() -> dict:
    return {
        "user_id": session.get("user_id"),
        "full_name": session.get("name"),
        "email": session.get("email"),
        "roles": list(session.get("roles", [])),
    }


def render_forbidden():
    return render_template("403.html", current_user=current_user_view()), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("auth"))
        return view(*args, **kwargs)

    return wrapper


def api_login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "title": "Not signed in", "message": "Please sign in to continue."}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: AppRole):
    """Allow users holding any of ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("auth"))

            held = set(session.get("roles", []))
            if not held.intersection(r.value for r in roles):
                return render_forbidden()

            return view(*args, **kwargs)

        return wrapper

    return decorator


professor_required = role_required(AppRole.PROFESSOR, AppRole.ADMIN)
admin_required = role_required(AppRole.ADMIN)
