"""Tutoring session lifecycle: booking, scoped reads and status changes."""
from __future__ import annotations

from datetime import datetime

from flask import current_app

from .auth import ensure_owner_or_admin
from .domain import (SESSION_TRANSITIONS, PaymentStatus, Role, SessionStatus, TutoringSession,
                     User, parse_enum)
from .errors import ForbiddenError, NotFoundError, ValidationError
from .storage import Storage
from .validation import optional_int, optional_text, required_int, text

ACTIVE_STATUSES = frozenset({SessionStatus.PENDING, SessionStatus.CONFIRMED})


def book_session(storage: Storage, learner: User, payload: dict) -> TutoringSession:
    """Create a pending, unpaid booking with the caller as learner.

    The tutor id is taken at face value: no existence, approval or overlap
    checks are made.
    """
    tutor_id = required_int(payload, "tutorId")
    date = text(payload, "date")
    start_time = text(payload, "startTime")
    end_time = text(payload, "endTime")
    location = text(payload, "location")

    if not date or not start_time or not end_time or not location:
        raise ValidationError("tutorId, date, startTime, endTime and location are required")

    session = storage.add_session(
        TutoringSession(
            learner_id=learner.id,
            tutor_id=tutor_id,
            course_id=optional_int(payload, "courseId"),
            date=date,
            start_time=start_time,
            end_time=end_time,
            location=location,
            status=SessionStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            # Pricing is not implemented; bookings carry no charge yet.
            amount=0.0,
            notes=optional_text(payload, "notes"),
        )
    )
    current_app.logger.info(
        "Session %s booked by learner %s with tutor %s", session.id, learner.id, tutor_id
    )
    return session


def _visible_to(user: User, session: TutoringSession) -> bool:
    if user.role is Role.LEARNER:
        return session.learner_id == user.id
    if user.role is Role.TUTOR:
        return session.tutor_id == user.id
    return user.role is Role.ADMIN


def sessions_for(storage: Storage, user: User) -> list[TutoringSession]:
    """Learners see their bookings, tutors the ones they teach, admins all."""
    return [s for s in storage.list_sessions() if _visible_to(user, s)]


def _session_date(session: TutoringSession) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(session.date)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def upcoming_sessions_for(storage: Storage, user: User,
                          now: datetime | None = None) -> list[TutoringSession]:
    now = now or datetime.now()
    upcoming = []
    for session in sessions_for(storage, user):
        if session.status not in ACTIVE_STATUSES:
            continue
        when = _session_date(session)
        if when is not None and when >= now:
            upcoming.append(session)
    return sorted(upcoming, key=lambda s: (s.date, s.start_time))


def get_session_or_404(storage: Storage, session_id: int) -> TutoringSession:
    session = storage.get_session(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


def cancel_session(storage: Storage, user: User, session_id: int) -> TutoringSession:
    """Cancel a session on behalf of its learner, its tutor or an admin.

    Cancelling is unconditional, so repeating it is a harmless no-op.
    """
    session = get_session_or_404(storage, session_id)
    ensure_owner_or_admin(user, session.learner_id, session.tutor_id)

    session.status = SessionStatus.CANCELLED
    session = storage.save_session(session)
    current_app.logger.info("Session %s cancelled by user %s", session.id, user.id)
    return session


def update_session_status(storage: Storage, user: User, session_id: int,
                          raw_status: object) -> TutoringSession:
    session = get_session_or_404(storage, session_id)
    if user.role is not Role.ADMIN and session.tutor_id != user.id:
        raise ForbiddenError("Only the session's tutor or an admin can change its status")

    new_status = parse_enum(SessionStatus, raw_status, "status")
    if new_status is session.status:
        return session
    if new_status not in SESSION_TRANSITIONS[session.status]:
        raise ValidationError(
            f"Cannot change a {session.status.value} session to {new_status.value}",
            error="invalid_transition",
        )

    session.status = new_status
    session = storage.save_session(session)
    current_app.logger.info(
        "Session %s moved to %s by user %s", session.id, new_status.value, user.id
    )
    return session


def session_payload(storage: Storage, session: TutoringSession) -> dict[str, object]:
    """Serialize a session with participant names; deleted users show as None."""
    data = session.to_dict()
    learner = storage.get_user(session.learner_id)
    tutor = storage.get_user(session.tutor_id)
    data["learnerName"] = learner.display_name if learner else None
    data["tutorName"] = tutor.display_name if tutor else None
    return data
