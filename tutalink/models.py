"""Database models backing SqlStorage."""
from __future__ import annotations

from datetime import datetime, timezone

from .domain import (ApplicationStatus, FooterContent, PaymentStatus, Review, Role,
                     SessionStatus, SystemConfig, TutorApplication, TutoringSession, User)
from .extensions import db


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _enum_column(enum_cls, name: str, default: str) -> db.Column:
    return db.Column(
        db.Enum(
            *(member.value for member in enum_cls),
            name=name,
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        default=default,
        server_default=default,
    )


class UserRecord(db.Model):
    __tablename__ = "users"
    # Ids are never reused after a delete.
    __table_args__ = {"sqlite_autoincrement": True}

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(150))
    role = _enum_column(Role, "user_role", Role.LEARNER.value)
    department = db.Column(db.String(150))
    year_of_study = db.Column(db.Integer)
    cwa = db.Column(db.Float)
    profile_image = db.Column(db.String(255))
    wallet_balance = db.Column(db.Float, nullable=False, default=0.0)
    stripe_customer_id = db.Column(db.String(255))
    is_approved = db.Column(db.Boolean, nullable=False, default=True)
    transcript_path = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_domain(self) -> User:
        return User(
            id=self.user_id,
            username=self.username,
            email=self.email,
            password=self.password_hash,
            full_name=self.full_name,
            role=Role(self.role),
            department=self.department,
            year_of_study=self.year_of_study,
            cwa=self.cwa,
            profile_image=self.profile_image,
            wallet_balance=self.wallet_balance or 0.0,
            stripe_customer_id=self.stripe_customer_id,
            is_approved=bool(self.is_approved),
            transcript_path=self.transcript_path,
        )

    def update_from(self, user: User) -> None:
        self.username = user.username
        self.email = user.email
        self.password_hash = user.password
        self.full_name = user.full_name
        self.role = user.role.value
        self.department = user.department
        self.year_of_study = user.year_of_study
        self.cwa = user.cwa
        self.profile_image = user.profile_image
        self.wallet_balance = user.wallet_balance
        self.stripe_customer_id = user.stripe_customer_id
        self.is_approved = user.is_approved
        self.transcript_path = user.transcript_path


class SessionRecord(db.Model):
    """Tutoring session bookings. Participant ids are deliberately not foreign keys."""

    __tablename__ = "tutoring_sessions"
    __table_args__ = {"sqlite_autoincrement": True}

    session_id = db.Column(db.Integer, primary_key=True)
    learner_id = db.Column(db.Integer, nullable=False, index=True)
    tutor_id = db.Column(db.Integer, nullable=False, index=True)
    course_id = db.Column(db.Integer)
    date = db.Column(db.String(32), nullable=False)
    start_time = db.Column(db.String(16), nullable=False)
    end_time = db.Column(db.String(16), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    status = _enum_column(SessionStatus, "session_status", SessionStatus.PENDING.value)
    payment_status = _enum_column(PaymentStatus, "payment_status", PaymentStatus.PENDING.value)
    amount = db.Column(db.Float, nullable=False, default=0.0)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_domain(self) -> TutoringSession:
        return TutoringSession(
            id=self.session_id,
            learner_id=self.learner_id,
            tutor_id=self.tutor_id,
            course_id=self.course_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            location=self.location,
            status=SessionStatus(self.status),
            payment_status=PaymentStatus(self.payment_status),
            amount=self.amount,
            notes=self.notes,
        )

    def update_from(self, session: TutoringSession) -> None:
        self.learner_id = session.learner_id
        self.tutor_id = session.tutor_id
        self.course_id = session.course_id
        self.date = session.date
        self.start_time = session.start_time
        self.end_time = session.end_time
        self.location = session.location
        self.status = session.status.value
        self.payment_status = session.payment_status.value
        self.amount = session.amount
        self.notes = session.notes


class ReviewRecord(db.Model):
    __tablename__ = "reviews"
    __table_args__ = {"sqlite_autoincrement": True}

    review_id = db.Column(db.Integer, primary_key=True)
    learner_id = db.Column(db.Integer, nullable=False, index=True)
    tutor_id = db.Column(db.Integer, nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)  # 1-5 stars
    comment = db.Column(db.Text, nullable=False)
    course_id = db.Column(db.Integer)
    created_at = db.Column(db.String(64), nullable=False)
    tutor_response = db.Column(db.Text)

    def to_domain(self) -> Review:
        return Review(
            id=self.review_id,
            learner_id=self.learner_id,
            tutor_id=self.tutor_id,
            rating=self.rating,
            comment=self.comment,
            course_id=self.course_id,
            created_at=self.created_at,
            tutor_response=self.tutor_response,
        )

    def update_from(self, review: Review) -> None:
        self.learner_id = review.learner_id
        self.tutor_id = review.tutor_id
        self.rating = review.rating
        self.comment = review.comment
        self.course_id = review.course_id
        self.created_at = review.created_at
        self.tutor_response = review.tutor_response


class TutorApplicationRecord(db.Model):
    __tablename__ = "tutor_applications"

    user_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    full_name = db.Column(db.String(150), nullable=False)
    department = db.Column(db.String(150))
    year_of_study = db.Column(db.Integer)
    cwa = db.Column(db.Float, nullable=False)
    subjects = db.Column(db.JSON, nullable=False, default=list)
    transcript_path = db.Column(db.String(255), nullable=False)
    status = _enum_column(ApplicationStatus, "application_status", ApplicationStatus.PENDING.value)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_domain(self) -> TutorApplication:
        return TutorApplication(
            user_id=self.user_id,
            full_name=self.full_name,
            department=self.department,
            year_of_study=self.year_of_study,
            cwa=self.cwa,
            subjects=list(self.subjects or []),
            transcript_path=self.transcript_path,
            status=ApplicationStatus(self.status),
        )

    def update_from(self, application: TutorApplication) -> None:
        self.full_name = application.full_name
        self.department = application.department
        self.year_of_study = application.year_of_study
        self.cwa = application.cwa
        self.subjects = list(application.subjects)
        self.transcript_path = application.transcript_path
        self.status = application.status.value


class SystemConfigRecord(db.Model):
    __tablename__ = "system_configs"
    __table_args__ = {"sqlite_autoincrement": True}

    config_id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False, default="")
    description = db.Column(db.String(255))

    def to_domain(self) -> SystemConfig:
        return SystemConfig(
            id=self.config_id,
            key=self.key,
            value=self.value,
            description=self.description,
        )


class FooterContentRecord(db.Model):
    __tablename__ = "footer_content"

    footer_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    copyright = db.Column(db.Text, nullable=False)
    links = db.Column(db.JSON, nullable=False, default=list)
    social_media = db.Column(db.JSON, nullable=False, default=list)

    def to_domain(self) -> FooterContent:
        return FooterContent(
            id=self.footer_id,
            copyright=self.copyright,
            links=[dict(link) for link in self.links or []],
            social_media=[dict(item) for item in self.social_media or []],
        )
