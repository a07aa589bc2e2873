"""User administration and self-service profile operations."""
from __future__ import annotations

import secrets

from flask import current_app

from .auth import ensure_unique_identity, hash_password, verify_password
from .domain import Role, SessionStatus, User, parse_enum
from .errors import NotFoundError, ValidationError
from .reviews import average_rating
from .sessions import sessions_for, upcoming_sessions_for
from .storage import Storage
from .validation import optional_float, optional_int, optional_text, text

MIN_PASSWORD_LENGTH = 6


def get_user_or_404(storage: Storage, user_id: int) -> User:
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(storage: Storage, payload: dict) -> User:
    """Admin-initiated account creation; any role may be assigned."""
    username = text(payload, "username")
    email = text(payload, "email")
    password = payload.get("password") if isinstance(payload.get("password"), str) else ""
    if not username or not email or not password:
        raise ValidationError("username, email and password are required")

    role = parse_enum(Role, payload.get("role") or Role.LEARNER.value, "role")
    ensure_unique_identity(storage, username, email)

    user = storage.add_user(
        User(
            username=username,
            email=email,
            password=hash_password(password),
            full_name=optional_text(payload, "fullName"),
            role=role,
            department=optional_text(payload, "department"),
            year_of_study=optional_int(payload, "yearOfStudy"),
            cwa=optional_float(payload, "cwa"),
            is_approved=True,
        )
    )
    current_app.logger.info("Admin created %s account %r (id=%s)", role.value, username, user.id)
    return user


def change_role(storage: Storage, user_id: int, raw_role: object) -> User:
    role = parse_enum(Role, raw_role, "role")
    user = get_user_or_404(storage, user_id)
    user.role = role
    user = storage.save_user(user)
    current_app.logger.info("User %s role changed to %s", user_id, role.value)
    return user


def set_approval(storage: Storage, user_id: int, is_approved: object) -> User:
    if not isinstance(is_approved, bool):
        raise ValidationError("isApproved must be a boolean")
    user = get_user_or_404(storage, user_id)
    user.is_approved = is_approved
    return storage.save_user(user)


def delete_user(storage: Storage, user_id: int) -> None:
    # Sessions and reviews referencing the user are left in place.
    if not storage.delete_user(user_id):
        raise NotFoundError("User not found")
    current_app.logger.info("User %s deleted", user_id)


def reset_password(storage: Storage, user_id: int) -> str:
    """Replace the user's password with a random temporary one and return it."""
    user = get_user_or_404(storage, user_id)
    temporary = f"temp{secrets.randbelow(900000) + 100000}"
    user.password = hash_password(temporary)
    storage.save_user(user)
    current_app.logger.info("Password reset for user %s", user_id)
    return temporary


def update_profile(storage: Storage, user: User, payload: dict) -> User:
    if "email" in payload:
        email = text(payload, "email")
        if not email:
            raise ValidationError("email cannot be empty")
        ensure_unique_identity(storage, "", email, exclude_user_id=user.id)
        user.email = email
    if "fullName" in payload:
        user.full_name = optional_text(payload, "fullName")
    if "department" in payload:
        user.department = optional_text(payload, "department")
    if "yearOfStudy" in payload:
        user.year_of_study = optional_int(payload, "yearOfStudy")
    if "profileImage" in payload:
        user.profile_image = optional_text(payload, "profileImage")
    return storage.save_user(user)


def change_password(storage: Storage, user: User, payload: dict) -> None:
    current = payload.get("currentPassword")
    new = payload.get("newPassword")
    if not isinstance(current, str) or not isinstance(new, str) or not current or not new:
        raise ValidationError("currentPassword and newPassword are required")
    if not verify_password(user.password, current):
        raise ValidationError("Current password is incorrect", error="invalid_password")
    if len(new) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user.password = hash_password(new)
    storage.save_user(user)
    current_app.logger.info("User %s changed their password", user.id)


def user_stats(storage: Storage, user: User) -> dict[str, object]:
    sessions = sessions_for(storage, user)
    stats: dict[str, object] = {
        "totalSessions": len(sessions),
        "upcomingSessions": len(upcoming_sessions_for(storage, user)),
        "completedSessions": sum(1 for s in sessions if s.status is SessionStatus.COMPLETED),
        "cancelledSessions": sum(1 for s in sessions if s.status is SessionStatus.CANCELLED),
        "walletBalance": user.wallet_balance,
    }
    reviews = storage.list_reviews()
    if user.role is Role.TUTOR:
        received = [r for r in reviews if r.tutor_id == user.id]
        stats["reviewsReceived"] = len(received)
        stats["averageRating"] = average_rating(received)
    else:
        stats["reviewsWritten"] = sum(1 for r in reviews if r.learner_id == user.id)
    return stats
