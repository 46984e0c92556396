"""
Flask Integration
=================

Glue between Flask and AuthManager: token extraction, a login_required
decorator and a JSON auth blueprint.

Usage:
    app = Flask(__name__)
    flask_auth = FlaskAuth(auth, app=app)
    app.register_blueprint(create_auth_blueprint(flask_auth))

    @app.route("/api/profile")
    @flask_auth.login_required
    def profile():
        return jsonify({"email": g.user.email})
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional

from flask import Blueprint, Flask, Response, g, jsonify, request

from fineauth.core.auth.auth_manager import AuthManager
from fineauth.core.auth.models import AuthResult, PublicUser
from fineauth.core.errors import (
    ConfigurationError,
    FineAuthError,
    InvalidCredentialsError,
    InvalidSessionError,
    UserAlreadyExistsError,
    ValidationError,
)

DEFAULT_COOKIE_NAME = "session"

_STATUS_BY_ERROR: dict[type[FineAuthError], int] = {
    InvalidCredentialsError: 401,
    InvalidSessionError: 401,
    UserAlreadyExistsError: 409,
    ConfigurationError: 500,
}


def session_token_from_request(cookie_name: str = DEFAULT_COOKIE_NAME) -> Optional[str]:
    """Read the session token from the Authorization header or a cookie."""
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(cookie_name) or None


def _user_json(user: PublicUser) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "created_at": user.created_at.isoformat(),
    }


class FlaskAuth:
    """
    Binds an AuthManager to a Flask application.

    On successful validation login_required sets:
        g.user          PublicUser
        g.auth_session  Session
    """

    def __init__(
        self,
        auth: AuthManager,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        app: Optional[Flask] = None,
    ) -> None:
        self.auth = auth
        self.cookie_name = cookie_name
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Register the FineAuthError JSON error handler."""
        app.register_error_handler(FineAuthError, self._handle_error)
        app.extensions["fineauth"] = self

    @staticmethod
    def _handle_error(error: FineAuthError):
        status = 400
        for error_type, code in _STATUS_BY_ERROR.items():
            if isinstance(error, error_type):
                status = code
                break
        return jsonify({"error": error.message, "code": error.code}), status

    def current_token(self) -> Optional[str]:
        return session_token_from_request(self.cookie_name)

    def login_required(self, f: Callable) -> Callable:
        """Reject requests without a valid session with 401."""
        @wraps(f)
        def wrapper(*args, **kwargs):
            token = self.current_token()
            validation = self.auth.validate_session(token) if token else None
            if validation is None:
                return jsonify({"error": "Unauthorized"}), 401
            g.user = validation.user
            g.auth_session = validation.session
            return f(*args, **kwargs)
        return wrapper

    def auth_response(self, result: AuthResult, status: int = 200) -> Response:
        """JSON body plus session cookie for a sign-up/sign-in result."""
        response = jsonify({
            "user": _user_json(result.user),
            "token": result.token,
            "expires_at": result.session.expires_at.isoformat(),
        })
        response.status_code = status
        response.set_cookie(
            self.cookie_name,
            result.token,
            expires=result.session.expires_at,
            httponly=True,
            samesite="Lax",
            secure=request.is_secure,
        )
        return response


def create_auth_blueprint(flask_auth: FlaskAuth, url_prefix: str = "/api/auth") -> Blueprint:
    """Blueprint with /signup, /signin, /signout and /me routes."""
    bp = Blueprint("fineauth", __name__, url_prefix=url_prefix)
    auth = flask_auth.auth

    def _credentials() -> tuple[str, str]:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        email, password = data.get("email"), data.get("password")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("email and password must be strings")
        return email, password

    @bp.route("/signup", methods=["POST"])
    def signup():
        email, password = _credentials()
        return flask_auth.auth_response(auth.sign_up(email, password), status=201)

    @bp.route("/signin", methods=["POST"])
    def signin():
        email, password = _credentials()
        return flask_auth.auth_response(auth.sign_in(email, password))

    @bp.route("/signout", methods=["POST"])
    def signout():
        token = flask_auth.current_token()
        if token:
            auth.sign_out(token)
        response = jsonify({"message": "Signed out"})
        response.delete_cookie(flask_auth.cookie_name)
        return response

    @bp.route("/me", methods=["GET"])
    @flask_auth.login_required
    def me():
        return jsonify({
            "user": _user_json(g.user),
            "session": {"expires_at": g.auth_session.expires_at.isoformat()},
        })

    return bp
