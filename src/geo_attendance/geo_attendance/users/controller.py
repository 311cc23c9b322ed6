from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..core.exceptions import AuthenticationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if container.session_guard.current_session() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(username, password)

                session.clear()
                session.permanent = bool(remember)

                session["user_id"] = s_user.user_id
                session["name"] = s_user.full_name
                session["role"] = s_user.role.value

                logger.info("User %s logged in", s_user.user_id)
                flash("Logged in successfully!", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed for %r", username)
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while logging in: {e}", "danger")
                else:
                    flash("System error while logging in", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))
