"""HTTP routes for learners, tutors and anonymous visitors."""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from . import applications, reviews, sessions, settings, users
from .auth import authenticate, caller, end_session, register_user, start_session
from .errors import ValidationError
from .storage import get_storage
from .validation import json_payload, text

bp = Blueprint("api", __name__)


@bp.get("/health")
def health_check() -> tuple[dict[str, str], int]:
    """
    Expose a simple uptime check endpoint.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is healthy and running.
    """
    return jsonify({"status": "ok", "storage": current_app.config["STORAGE_BACKEND"]}), 200


# --- Authentication ---


@bp.post("/api/register")
def register() -> tuple[dict[str, object], int]:
    """Register a new learner and log them in.
    ---
    tags:
      - Authentication
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            username:
              type: string
            email:
              type: string
            password:
              type: string
            fullName:
              type: string
          required: [username, email, password, fullName]
    responses:
      201:
        description: User registered and logged in
      400:
        description: Missing fields, or username/email already in use
    """
    user = register_user(get_storage(), json_payload())
    start_session(user)
    return jsonify(user.to_dict()), 201


@bp.post("/api/login")
def login() -> tuple[dict[str, object], int]:
    """Authenticate by username/password and start a cookie session.
    ---
    tags:
      - Authentication
    responses:
      200:
        description: Login successful
      400:
        description: username and password are required
      401:
        description: Invalid username or password
    """
    payload = json_payload()
    username = text(payload, "username")
    password = payload.get("password") if isinstance(payload.get("password"), str) else ""

    if not username or not password:
        raise ValidationError("username and password are required")

    user = authenticate(get_storage(), username, password)
    start_session(user)
    current_app.logger.info("User %s logged in", user.id)
    return jsonify(user.to_dict()), 200


@bp.post("/api/logout")
def logout() -> tuple[dict[str, str], int]:
    end_session()
    return jsonify({"message": "Logged out"}), 200


# --- Current user ---


@bp.get("/api/user")
@login_required
def get_current_user() -> tuple[dict[str, object], int]:
    return jsonify(caller().to_dict()), 200


@bp.patch("/api/user/profile")
@login_required
def update_profile() -> tuple[dict[str, object], int]:
    user = users.update_profile(get_storage(), caller(), json_payload())
    return jsonify(user.to_dict()), 200


@bp.post("/api/user/change-password")
@login_required
def change_password() -> tuple[dict[str, str], int]:
    users.change_password(get_storage(), caller(), json_payload())
    return jsonify({"message": "Password changed successfully"}), 200


@bp.get("/api/user/stats")
@login_required
def get_user_stats() -> tuple[dict[str, object], int]:
    return jsonify(users.user_stats(get_storage(), caller())), 200


# --- Tutors ---


@bp.get("/api/tutors")
def list_tutors() -> tuple[list[dict[str, object]], int]:
    """List approved tutors, optionally filtered.
    ---
    tags:
      - Tutors
    parameters:
      - name: q
        in: query
        type: string
        description: Case-insensitive match on username, full name or subject
      - name: department
        in: query
        type: string
    responses:
      200:
        description: List of tutors with derived rating
    """
    query = (request.args.get("q") or "").strip()
    department = (request.args.get("department") or "").strip()
    return jsonify(reviews.list_tutors(get_storage(), query, department)), 200


@bp.get("/api/tutors/recommended")
def list_recommended_tutors() -> tuple[list[dict[str, object]], int]:
    limit = current_app.config["RECOMMENDED_TUTOR_LIMIT"]
    return jsonify(reviews.recommended_tutors(get_storage(), limit)), 200


@bp.get("/api/tutors/<int:tutor_id>")
def get_tutor(tutor_id: int) -> tuple[dict[str, object], int]:
    return jsonify(reviews.get_tutor(get_storage(), tutor_id)), 200


# --- Sessions (bookings) ---


@bp.post("/api/sessions")
@login_required
def book_session() -> tuple[dict[str, object], int]:
    """Book a session with a tutor; the caller becomes the learner.
    ---
    tags:
      - Sessions
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            tutorId:
              type: integer
            courseId:
              type: integer
            date:
              type: string
            startTime:
              type: string
            endTime:
              type: string
            location:
              type: string
            notes:
              type: string
          required: [tutorId, date, startTime, endTime, location]
    responses:
      201:
        description: Session created with status and paymentStatus pending
      400:
        description: Invalid payload
      401:
        description: Not logged in
    """
    storage = get_storage()
    session = sessions.book_session(storage, caller(), json_payload())
    return jsonify(sessions.session_payload(storage, session)), 201


@bp.get("/api/sessions")
@login_required
def list_sessions() -> tuple[list[dict[str, object]], int]:
    storage = get_storage()
    found = sessions.sessions_for(storage, caller())
    return jsonify([sessions.session_payload(storage, s) for s in found]), 200


@bp.get("/api/sessions/upcoming")
@login_required
def list_upcoming_sessions() -> tuple[list[dict[str, object]], int]:
    storage = get_storage()
    found = sessions.upcoming_sessions_for(storage, caller())
    return jsonify([sessions.session_payload(storage, s) for s in found]), 200


@bp.post("/api/sessions/<int:session_id>/cancel")
@login_required
def cancel_session(session_id: int) -> tuple[dict[str, object], int]:
    """Cancel a session (its learner, its tutor or an admin).
    ---
    tags:
      - Sessions
    responses:
      200:
        description: Session cancelled (repeat cancels succeed unchanged)
      401:
        description: Not logged in
      403:
        description: Caller is not a participant or admin
      404:
        description: Session not found
    """
    storage = get_storage()
    session = sessions.cancel_session(storage, caller(), session_id)
    return jsonify(sessions.session_payload(storage, session)), 200


@bp.put("/api/sessions/<int:session_id>/status")
@login_required
def update_session_status(session_id: int) -> tuple[dict[str, object], int]:
    storage = get_storage()
    status = json_payload().get("status")
    session = sessions.update_session_status(storage, caller(), session_id, status)
    return jsonify(sessions.session_payload(storage, session)), 200


# --- Reviews ---


@bp.post("/api/reviews")
@login_required
def create_review() -> tuple[dict[str, object], int]:
    """Leave a review for a tutor.
    ---
    tags:
      - Reviews
    parameters:
      - name: body
        in: body
        required: true
        schema:
          properties:
            tutorId:
              type: integer
            rating:
              type: integer
              minimum: 1
              maximum: 5
            comment:
              type: string
            courseId:
              type: integer
            createdAt:
              type: string
              format: date-time
    responses:
      201:
        description: Review created
      400:
        description: Invalid input
      403:
        description: Caller is not a learner
    """
    storage = get_storage()
    review = reviews.create_review(storage, caller(), json_payload())
    return jsonify(reviews.review_payload(storage, review)), 201


@bp.get("/api/reviews")
@login_required
def list_reviews() -> tuple[list[dict[str, object]], int]:
    storage = get_storage()
    found = reviews.reviews_for(storage, caller())
    return jsonify([reviews.review_payload(storage, r) for r in found]), 200


@bp.get("/api/reviews/recent")
def list_recent_reviews() -> tuple[list[dict[str, object]], int]:
    storage = get_storage()
    found = reviews.recent_reviews(storage, current_app.config["RECENT_REVIEW_LIMIT"])
    return jsonify([reviews.review_payload(storage, r) for r in found]), 200


# --- Tutor applications ---


@bp.post("/api/tutor-applications")
@login_required
def submit_tutor_application() -> tuple[dict[str, object], int]:
    """Apply to become a tutor (learners only, CWA >= 3.4).
    ---
    tags:
      - Tutor Applications
    responses:
      201:
        description: Application recorded as pending
      400:
        description: CWA below the minimum or no subjects
      403:
        description: Caller is not a learner
    """
    application = applications.submit_application(get_storage(), caller(), json_payload())
    return jsonify(application.to_dict()), 201


@bp.get("/api/tutor-applications/mine")
@login_required
def get_own_tutor_application() -> tuple[dict[str, object], int]:
    application = applications.get_application_or_404(get_storage(), current_user.id)
    return jsonify(application.to_dict()), 200


# --- Site content ---


@bp.get("/api/footer-content")
def get_footer_content() -> tuple[dict[str, object], int]:
    return jsonify(settings.get_footer(get_storage()).to_dict()), 200


def register_routes(app) -> None:
    from .routes_admin import bp_admin

    app.register_blueprint(bp)
    app.register_blueprint(bp_admin)
