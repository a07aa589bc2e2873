"""Storage implementation backed by Flask-SQLAlchemy."""
from __future__ import annotations

from sqlalchemy import func, select

from .domain import FooterContent, Review, SystemConfig, TutorApplication, TutoringSession, User
from .extensions import db
from .models import (FooterContentRecord, ReviewRecord, SessionRecord, SystemConfigRecord,
                     TutorApplicationRecord, UserRecord)
from .storage import Storage


class SqlStorage(Storage):
    """Relational implementation of :class:`Storage`.

    Every mutation commits immediately; a failed commit is rolled back and the
    ``SQLAlchemyError`` propagates to the app's error handler.
    """

    def _commit(self) -> None:
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def create_schema(self) -> None:
        db.create_all()

    # Users

    def get_user(self, user_id: int) -> User | None:
        record = db.session.get(UserRecord, user_id)
        return record.to_domain() if record else None

    def list_users(self) -> list[User]:
        records = db.session.scalars(select(UserRecord).order_by(UserRecord.user_id))
        return [record.to_domain() for record in records]

    def find_user_by_username(self, username: str) -> User | None:
        record = db.session.scalars(
            select(UserRecord).where(func.lower(UserRecord.username) == username.lower())
        ).first()
        return record.to_domain() if record else None

    def find_user_by_email(self, email: str) -> User | None:
        record = db.session.scalars(
            select(UserRecord).where(func.lower(UserRecord.email) == email.lower())
        ).first()
        return record.to_domain() if record else None

    def add_user(self, user: User) -> User:
        record = UserRecord()
        record.update_from(user)
        db.session.add(record)
        self._commit()
        return record.to_domain()

    def save_user(self, user: User) -> User:
        record = db.session.get(UserRecord, user.id) or UserRecord(user_id=user.id)
        record.update_from(user)
        db.session.add(record)
        self._commit()
        return record.to_domain()

    def delete_user(self, user_id: int) -> bool:
        record = db.session.get(UserRecord, user_id)
        if record is None:
            return False
        db.session.delete(record)
        self._commit()
        return True

    # Sessions

    def get_session(self, session_id: int) -> TutoringSession | None:
        record = db.session.get(SessionRecord, session_id)
        return record.to_domain() if record else None

    def list_sessions(self) -> list[TutoringSession]:
        records = db.session.scalars(select(SessionRecord).order_by(SessionRecord.session_id))
        return [record.to_domain() for record in records]

    def add_session(self, session: TutoringSession) -> TutoringSession:
        record = SessionRecord()
        record.update_from(session)
        db.session.add(record)
        self._commit()
        return record.to_domain()

    def save_session(self, session: TutoringSession) -> TutoringSession:
        record = db.session.get(SessionRecord, session.id) or SessionRecord(session_id=session.id)
        record.update_from(session)
        db.session.add(record)
        self._commit()
        return record.to_domain()

    # Reviews

    def list_reviews(self) -> list[Review]:
        records = db.session.scalars(select(ReviewRecord).order_by(ReviewRecord.review_id))
        return [record.to_domain() for record in records]

    def add_review(self, review: Review) -> Review:
        record = ReviewRecord()
        record.update_from(review)
        db.session.add(record)
        self._commit()
        return record.to_domain()

    # Tutor applications

    def get_tutor_application(self, user_id: int) -> TutorApplication | None:
        record = db.session.get(TutorApplicationRecord, user_id)
        return record.to_domain() if record else None

    def list_tutor_applications(self) -> list[TutorApplication]:
        records = db.session.scalars(
            select(TutorApplicationRecord).order_by(TutorApplicationRecord.user_id)
        )
        return [record.to_domain() for record in records]

    def save_tutor_application(self, application: TutorApplication) -> TutorApplication:
        record = db.session.get(TutorApplicationRecord, application.user_id)
        if record is None:
            record = TutorApplicationRecord(user_id=application.user_id)
            db.session.add(record)
        record.update_from(application)
        self._commit()
        return record.to_domain()

    # System configuration

    def get_system_config(self, key: str) -> SystemConfig | None:
        record = db.session.scalars(
            select(SystemConfigRecord).where(SystemConfigRecord.key == key)
        ).first()
        return record.to_domain() if record else None

    def list_system_configs(self) -> list[SystemConfig]:
        records = db.session.scalars(
            select(SystemConfigRecord).order_by(SystemConfigRecord.config_id)
        )
        return [record.to_domain() for record in records]

    def save_system_config(self, config: SystemConfig) -> SystemConfig:
        record = db.session.scalars(
            select(SystemConfigRecord).where(SystemConfigRecord.key == config.key)
        ).first()
        if record is None:
            record = SystemConfigRecord(key=config.key)
            db.session.add(record)
        record.value = config.value
        record.description = config.description
        self._commit()
        return record.to_domain()

    # Footer content

    def get_footer_content(self) -> FooterContent | None:
        record = db.session.get(FooterContentRecord, 1)
        return record.to_domain() if record else None

    def save_footer_content(self, content: FooterContent) -> FooterContent:
        record = db.session.get(FooterContentRecord, content.id)
        if record is None:
            record = FooterContentRecord(footer_id=content.id)
            db.session.add(record)
        record.copyright = content.copyright
        record.links = [dict(link) for link in content.links]
        record.social_media = [dict(item) for item in content.social_media]
        self._commit()
        return record.to_domain()
