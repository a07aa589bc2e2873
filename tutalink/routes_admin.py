"""Admin-only routes: users, tutor applications, dashboard and site settings."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from . import applications, dashboard, reviews, settings, users
from .auth import admin_required
from .storage import get_storage
from .validation import json_payload

bp_admin = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp_admin.get("/dashboard")
@admin_required
def get_dashboard() -> tuple[dict[str, object], int]:
    """Summary counts for the admin dashboard.
    ---
    tags:
      - Admin
    responses:
      200:
        description: totalUsers, totalTutors, totalSessions, totalRevenue, pendingApplications
      401:
        description: Not logged in
      403:
        description: Caller is not an admin
    """
    return jsonify(dashboard.dashboard_summary(get_storage())), 200


# --- BEGIN: Admin - Manage Users ---


@bp_admin.get("/users")
@admin_required
def list_users() -> tuple[list[dict[str, object]], int]:
    return jsonify([u.to_dict() for u in get_storage().list_users()]), 200


@bp_admin.post("/users")
@admin_required
def create_user() -> tuple[dict[str, object], int]:
    user = users.create_user(get_storage(), json_payload())
    return jsonify(user.to_dict()), 201


@bp_admin.get("/users/<int:user_id>")
@admin_required
def get_user(user_id: int) -> tuple[dict[str, object], int]:
    return jsonify(users.get_user_or_404(get_storage(), user_id).to_dict()), 200


@bp_admin.patch("/users/<int:user_id>/role")
@admin_required
def change_user_role(user_id: int) -> tuple[dict[str, object], int]:
    """Change a user's role.
    ---
    tags:
      - Admin
    parameters:
      - in: body
        name: body
        required: true
        schema:
          properties:
            role:
              type: string
              enum: [learner, tutor, admin]
    responses:
      200:
        description: Updated user
      400:
        description: Invalid role
      404:
        description: User not found
    """
    user = users.change_role(get_storage(), user_id, json_payload().get("role"))
    return jsonify(user.to_dict()), 200


@bp_admin.patch("/users/<int:user_id>/approve")
@admin_required
def set_user_approval(user_id: int) -> tuple[dict[str, object], int]:
    user = users.set_approval(get_storage(), user_id, json_payload().get("isApproved"))
    return jsonify(user.to_dict()), 200


@bp_admin.delete("/users/<int:user_id>")
@admin_required
def delete_user(user_id: int):
    users.delete_user(get_storage(), user_id)
    return "", 204


@bp_admin.post("/users/<int:user_id>/reset-password")
@admin_required
def reset_user_password(user_id: int) -> tuple[dict[str, str], int]:
    temporary = users.reset_password(get_storage(), user_id)
    return jsonify({"message": "Password reset successfully", "temporaryPassword": temporary}), 200


@bp_admin.get("/tutors")
@admin_required
def list_all_tutors() -> tuple[list[dict[str, object]], int]:
    return jsonify(reviews.list_tutors(get_storage(), approved_only=False)), 200


# --- END: Admin - Manage Users ---

# --- BEGIN: Admin - Tutor Applications ---


@bp_admin.get("/tutor-applications")
@admin_required
def list_tutor_applications() -> tuple[list[dict[str, object]], int]:
    status = (request.args.get("status") or "").strip().lower() or None
    found = applications.list_applications(get_storage(), status)
    return jsonify([a.to_dict() for a in found]), 200


@bp_admin.post("/tutor-applications/<int:user_id>/approve")
@admin_required
def approve_tutor_application(user_id: int) -> tuple[dict[str, object], int]:
    """Approve a pending application and promote the applicant to tutor.
    ---
    tags:
      - Admin
    responses:
      200:
        description: Application approved
      400:
        description: Application is not pending
      404:
        description: Application not found
    """
    application = applications.approve_application(get_storage(), user_id)
    return jsonify(application.to_dict()), 200


@bp_admin.post("/tutor-applications/<int:user_id>/reject")
@admin_required
def reject_tutor_application(user_id: int) -> tuple[dict[str, object], int]:
    application = applications.reject_application(get_storage(), user_id)
    return jsonify(application.to_dict()), 200


# --- END: Admin - Tutor Applications ---

# --- BEGIN: Admin - Site Settings ---


@bp_admin.get("/system-config")
@admin_required
def list_system_configs() -> tuple[list[dict[str, object]], int]:
    return jsonify([c.to_dict() for c in get_storage().list_system_configs()]), 200


@bp_admin.get("/system-config/<string:key>")
@admin_required
def get_system_config(key: str) -> tuple[dict[str, object], int]:
    return jsonify(settings.get_config_or_404(get_storage(), key).to_dict()), 200


@bp_admin.put("/system-config/<string:key>")
@admin_required
def put_system_config(key: str) -> tuple[dict[str, object], int]:
    config = settings.put_config(get_storage(), key, json_payload())
    return jsonify(config.to_dict()), 200


@bp_admin.put("/footer-content")
@admin_required
def replace_footer_content() -> tuple[dict[str, object], int]:
    footer = settings.replace_footer(get_storage(), json_payload())
    return jsonify(footer.to_dict()), 200


# --- END: Admin - Site Settings ---
