"""Authentication gate and authorization policy.

Passwords are stored as werkzeug salted hashes. A successful login stores
the user id in the Flask session cookie through Flask-Login; every request
reloads the caller from the active storage, so a deleted account is
anonymous on its next request.
"""
from __future__ import annotations

from functools import wraps

from flask import current_app, session
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from .domain import Role, User
from .errors import AuthenticationError, ForbiddenError, ValidationError
from .extensions import login_manager
from .storage import Storage, get_storage
from .validation import text

INVALID_CREDENTIALS = "Invalid username or password"

# Checked against when the username is unknown so both failures cost one hash.
_DUMMY_PASSWORD_HASH = generate_password_hash("tutalink-dummy-password")


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(stored: str, supplied: str) -> bool:
    """Compare ``supplied`` against a stored werkzeug hash in constant time.

    Anything that is not a werkzeug hash (e.g. a plaintext value) never matches.
    """
    if not stored or not supplied:
        return False
    return check_password_hash(stored, supplied)


@login_manager.user_loader
def load_user(user_id: str) -> User | None:
    try:
        return get_storage().get_user(int(user_id))
    except ValueError:
        return None


@login_manager.unauthorized_handler
def handle_unauthorized():
    raise AuthenticationError()


def caller() -> User:
    """Return the authenticated user behind the current request, freshly loaded."""
    return get_storage().get_user(int(current_user.get_id()))


def ensure_unique_identity(storage: Storage, username: str, email: str,
                           exclude_user_id: int | None = None) -> None:
    existing = storage.find_user_by_username(username) if username else None
    if existing is not None and existing.id != exclude_user_id:
        raise ValidationError("Username already exists", error="username_taken")

    existing = storage.find_user_by_email(email) if email else None
    if existing is not None and existing.id != exclude_user_id:
        raise ValidationError("Email already in use", error="email_taken")


def register_user(storage: Storage, payload: dict) -> User:
    """Create a learner account from a registration payload."""
    username = text(payload, "username")
    email = text(payload, "email")
    full_name = text(payload, "fullName")
    password = payload.get("password") if isinstance(payload.get("password"), str) else ""

    if not username or not email or not password or not full_name:
        raise ValidationError("All fields are required")

    ensure_unique_identity(storage, username, email)

    user = storage.add_user(
        User(
            username=username,
            email=email,
            password=hash_password(password),
            full_name=full_name,
            role=Role.LEARNER,
            is_approved=True,
        )
    )
    current_app.logger.info("Registered learner %r (id=%s)", user.username, user.id)
    return user


def authenticate(storage: Storage, username: str, password: str) -> User:
    user = storage.find_user_by_username(username)
    # Unknown usernames and wrong passwords fail the same way.
    if user is None:
        check_password_hash(_DUMMY_PASSWORD_HASH, password)
    if user is None or not verify_password(user.password, password):
        current_app.logger.warning("Rejected login for username %r", username)
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def start_session(user: User) -> None:
    session.permanent = True
    login_user(user)


def end_session() -> None:
    logout_user()
    session.clear()


def roles_required(*roles: Role):
    """Allow only authenticated callers holding one of ``roles``."""

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.role not in roles:
                raise ForbiddenError()
            return view(*args, **kwargs)

        return wrapped

    return decorator


admin_required = roles_required(Role.ADMIN)


def ensure_owner_or_admin(user: User, *owner_ids: int | None) -> None:
    if user.role is Role.ADMIN or user.id in owner_ids:
        return
    raise ForbiddenError()
