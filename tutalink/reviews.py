"""Reviews and the tutor listings whose rating is derived from them."""
from __future__ import annotations

from datetime import datetime, timezone

from flask import current_app

from .domain import ApplicationStatus, Review, Role, User
from .errors import ForbiddenError, NotFoundError, ValidationError
from .storage import Storage
from .validation import optional_int, required_int, text


def average_rating(reviews: list[Review]) -> float:
    """Arithmetic mean of the ratings, 0 when there are none."""
    if not reviews:
        return 0.0
    return sum(r.rating for r in reviews) / len(reviews)


def _created_at(payload: dict) -> str:
    # A caller-supplied timestamp is trusted as long as it parses.
    raw = text(payload, "createdAt")
    if raw:
        try:
            datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError("createdAt must be an ISO 8601 timestamp") from None
        return raw
    return datetime.now(timezone.utc).isoformat()


def create_review(storage: Storage, learner: User, payload: dict) -> Review:
    """Attach a review from the caller to a tutor.

    No completed session between the two parties is required.
    """
    if learner.role is not Role.LEARNER:
        raise ForbiddenError("Only learners can leave reviews")

    tutor_id = required_int(payload, "tutorId")
    rating = payload.get("rating")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be an integer between 1 and 5", error="invalid_rating")

    comment = text(payload, "comment")
    if not comment:
        raise ValidationError("comment is required")

    review = storage.add_review(
        Review(
            learner_id=learner.id,
            tutor_id=tutor_id,
            rating=rating,
            comment=comment,
            course_id=optional_int(payload, "courseId"),
            created_at=_created_at(payload),
        )
    )
    current_app.logger.info("Review %s left by learner %s for tutor %s", review.id, learner.id, tutor_id)
    return review


def reviews_for(storage: Storage, user: User) -> list[Review]:
    reviews = storage.list_reviews()
    if user.role is Role.LEARNER:
        return [r for r in reviews if r.learner_id == user.id]
    if user.role is Role.TUTOR:
        return [r for r in reviews if r.tutor_id == user.id]
    return reviews


def _sort_key(review: Review) -> datetime:
    try:
        parsed = datetime.fromisoformat(review.created_at.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def recent_reviews(storage: Storage, limit: int) -> list[Review]:
    return sorted(storage.list_reviews(), key=_sort_key, reverse=True)[:limit]


def review_payload(storage: Storage, review: Review) -> dict[str, object]:
    data = review.to_dict()
    learner = storage.get_user(review.learner_id)
    tutor = storage.get_user(review.tutor_id)
    data["learnerName"] = learner.display_name if learner else None
    data["tutorName"] = tutor.display_name if tutor else None
    return data


# Tutor listings

def tutor_payload(storage: Storage, user: User, reviews: list[Review] | None = None) -> dict[str, object]:
    if reviews is None:
        reviews = storage.list_reviews()
    own_reviews = [r for r in reviews if r.tutor_id == user.id]

    application = storage.get_tutor_application(user.id)
    subjects = (
        list(application.subjects)
        if application is not None and application.status is ApplicationStatus.APPROVED
        else []
    )

    # Public listing: wallet, payment and transcript fields stay private.
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "role": user.role.value,
        "department": user.department,
        "yearOfStudy": user.year_of_study,
        "cwa": user.cwa,
        "profileImage": user.profile_image,
        "isApproved": user.is_approved,
        "rating": average_rating(own_reviews) if own_reviews else current_app.config["DEFAULT_TUTOR_RATING"],
        "reviewCount": len(own_reviews),
        "subjects": subjects,
        "price": current_app.config["DEFAULT_TUTOR_PRICE"],
        "availability": [],
        "reviews": [r.to_dict() for r in own_reviews],
    }


def _matches(tutor: dict[str, object], query: str, department: str) -> bool:
    if department and (tutor.get("department") or "").lower() != department.lower():
        return False
    if not query:
        return True
    haystack = [tutor.get("username") or "", tutor.get("fullName") or "", *tutor["subjects"]]
    return any(query.lower() in value.lower() for value in haystack)


def list_tutors(storage: Storage, query: str = "", department: str = "",
                approved_only: bool = True) -> list[dict[str, object]]:
    reviews = storage.list_reviews()
    tutors = [
        tutor_payload(storage, user, reviews)
        for user in storage.list_users()
        if user.role is Role.TUTOR and (user.is_approved or not approved_only)
    ]
    return [t for t in tutors if _matches(t, query, department)]


def recommended_tutors(storage: Storage, limit: int) -> list[dict[str, object]]:
    tutors = list_tutors(storage)
    return sorted(tutors, key=lambda t: t["rating"], reverse=True)[:limit]


def get_tutor(storage: Storage, tutor_id: int) -> dict[str, object]:
    user = storage.get_user(tutor_id)
    if user is None or user.role is not Role.TUTOR:
        raise NotFoundError("Tutor not found")
    return tutor_payload(storage, user)
