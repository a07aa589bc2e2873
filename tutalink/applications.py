"""Tutor application lifecycle: pending -> approved | rejected."""
from __future__ import annotations

from flask import current_app

from .domain import ApplicationStatus, Role, TutorApplication, User, parse_enum
from .errors import ForbiddenError, NotFoundError, ValidationError
from .storage import Storage
from .validation import optional_float, optional_int, optional_text


def _subjects(payload: dict) -> list[str]:
    subjects = payload.get("subjects")
    if not isinstance(subjects, list):
        raise ValidationError("At least one subject is required")
    cleaned = [s.strip() for s in subjects if isinstance(s, str) and s.strip()]
    if not cleaned or len(cleaned) != len(subjects):
        raise ValidationError("At least one subject is required")
    return cleaned


def submit_application(storage: Storage, user: User, payload: dict) -> TutorApplication:
    """Record (or replace) the caller's application to become a tutor."""
    if user.role is not Role.LEARNER:
        raise ForbiddenError("Only learners can apply to become tutors")

    cwa = optional_float(payload, "cwa")
    minimum = current_app.config["MIN_TUTOR_CWA"]
    if cwa is None or not cwa >= minimum:
        raise ValidationError(f"Minimum CWA of {minimum} is required", error="cwa_too_low")

    application = TutorApplication(
        user_id=user.id,
        full_name=user.display_name,
        department=optional_text(payload, "department"),
        year_of_study=optional_int(payload, "yearOfStudy"),
        cwa=cwa,
        subjects=_subjects(payload),
        transcript_path=current_app.config["TRANSCRIPT_PLACEHOLDER_PATH"],
        status=ApplicationStatus.PENDING,
    )
    # One application per user: a resubmission replaces the previous record.
    application = storage.save_tutor_application(application)
    current_app.logger.info("Tutor application submitted by user %s", user.id)
    return application


def get_application_or_404(storage: Storage, user_id: int) -> TutorApplication:
    application = storage.get_tutor_application(user_id)
    if application is None:
        raise NotFoundError("Application not found")
    return application


def list_applications(storage: Storage, status: str | None = None) -> list[TutorApplication]:
    applications = storage.list_tutor_applications()
    if status:
        wanted = parse_enum(ApplicationStatus, status, "status")
        applications = [a for a in applications if a.status is wanted]
    return applications


def _decide(storage: Storage, user_id: int, decision: ApplicationStatus) -> TutorApplication:
    application = get_application_or_404(storage, user_id)
    if application.status is not ApplicationStatus.PENDING:
        raise ValidationError(
            f"Application is already {application.status.value}", error="invalid_status"
        )

    application.status = decision
    application = storage.save_tutor_application(application)
    current_app.logger.info("Tutor application of user %s %s", user_id, decision.value)
    return application


def approve_application(storage: Storage, user_id: int) -> TutorApplication:
    """Approve a pending application and promote the applicant to tutor."""
    application = _decide(storage, user_id, ApplicationStatus.APPROVED)

    user = storage.get_user(user_id)
    if user is not None:
        user.role = Role.TUTOR
        storage.save_user(user)
    else:
        current_app.logger.warning("Approved application for missing user %s", user_id)
    return application


def reject_application(storage: Storage, user_id: int) -> TutorApplication:
    return _decide(storage, user_id, ApplicationStatus.REJECTED)
