"""Domain records and enumerations shared by the storage backends and managers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Type, TypeVar

from flask_login import UserMixin

from .errors import ValidationError

E = TypeVar("E", bound=Enum)


class Role(str, Enum):
    LEARNER = "learner"
    TUTOR = "tutor"
    ADMIN = "admin"


class SessionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Status changes a tutor or admin may request explicitly. Completed and
# cancelled sessions are terminal.
SESSION_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.CONFIRMED, SessionStatus.CANCELLED}),
    SessionStatus.CONFIRMED: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}


def parse_enum(enum_cls: Type[E], value: object, field_name: str) -> E:
    """Convert a raw payload value into ``enum_cls`` or raise a validation error."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"{field_name} must be one of: {allowed}", error=f"invalid_{field_name}"
        ) from None


@dataclass(eq=False)
class User(UserMixin):
    username: str
    email: str
    password: str
    id: int | None = None
    full_name: str | None = None
    role: Role = Role.LEARNER
    department: str | None = None
    year_of_study: int | None = None
    cwa: float | None = None
    profile_image: str | None = None
    wallet_balance: float = 0.0
    stripe_customer_id: str | None = None
    is_approved: bool = True
    transcript_path: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def to_dict(self) -> dict[str, object]:
        # The password hash never leaves the server.
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
            "department": self.department,
            "yearOfStudy": self.year_of_study,
            "cwa": self.cwa,
            "profileImage": self.profile_image,
            "walletBalance": self.wallet_balance,
            "stripeCustomerId": self.stripe_customer_id,
            "isApproved": self.is_approved,
            "transcriptPath": self.transcript_path,
        }


@dataclass
class TutoringSession:
    """A booking between a learner and a tutor."""

    learner_id: int
    tutor_id: int
    date: str
    start_time: str
    end_time: str
    location: str
    id: int | None = None
    course_id: int | None = None
    status: SessionStatus = SessionStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    amount: float = 0.0
    notes: str | None = None

    def involves(self, user_id: int | None) -> bool:
        return user_id is not None and user_id in (self.learner_id, self.tutor_id)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "learnerId": self.learner_id,
            "tutorId": self.tutor_id,
            "courseId": self.course_id,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "status": self.status.value,
            "paymentStatus": self.payment_status.value,
            "amount": self.amount,
            "notes": self.notes,
        }


@dataclass
class Review:
    learner_id: int
    tutor_id: int
    rating: int
    comment: str
    created_at: str
    id: int | None = None
    course_id: int | None = None
    tutor_response: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "learnerId": self.learner_id,
            "tutorId": self.tutor_id,
            "rating": self.rating,
            "comment": self.comment,
            "courseId": self.course_id,
            "createdAt": self.created_at,
            "tutorResponse": self.tutor_response,
        }


@dataclass
class TutorApplication:
    """A learner's request to become a tutor, keyed by the applicant's user id."""

    user_id: int
    full_name: str
    cwa: float
    subjects: list[str]
    transcript_path: str
    department: str | None = None
    year_of_study: int | None = None
    status: ApplicationStatus = ApplicationStatus.PENDING

    def to_dict(self) -> dict[str, object]:
        return {
            "userId": self.user_id,
            "fullName": self.full_name,
            "department": self.department,
            "yearOfStudy": self.year_of_study,
            "cwa": self.cwa,
            "subjects": list(self.subjects),
            "transcriptPath": self.transcript_path,
            "status": self.status.value,
        }


@dataclass
class SystemConfig:
    key: str
    value: str
    id: int | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "description": self.description,
        }


@dataclass
class FooterContent:
    copyright: str
    links: list[dict[str, str]] = field(default_factory=list)
    social_media: list[dict[str, str]] = field(default_factory=list)
    id: int = 1

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "copyright": self.copyright,
            "links": [dict(link) for link in self.links],
            "socialMedia": [dict(item) for item in self.social_media],
        }
