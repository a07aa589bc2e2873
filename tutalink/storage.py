"""Entity store interface and the in-memory implementation."""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod

from flask import current_app

from .domain import FooterContent, Review, SystemConfig, TutorApplication, TutoringSession, User

STORAGE_EXTENSION_KEY = "tutalink.storage"


class Storage(ABC):
    """Repository interface the managers depend on.

    Implementations assign ids on ``add_*`` (monotonically, per entity type)
    and return detached copies, so mutating a returned record has no effect
    until it is passed back through ``save_*``.
    """

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    @abstractmethod
    def add_user(self, user: User) -> User: ...

    @abstractmethod
    def save_user(self, user: User) -> User: ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    def find_user_by_username(self, username: str) -> User | None:
        wanted = username.lower()
        return next((u for u in self.list_users() if u.username.lower() == wanted), None)

    def find_user_by_email(self, email: str) -> User | None:
        wanted = email.lower()
        return next((u for u in self.list_users() if u.email.lower() == wanted), None)

    # Sessions
    @abstractmethod
    def get_session(self, session_id: int) -> TutoringSession | None: ...

    @abstractmethod
    def list_sessions(self) -> list[TutoringSession]: ...

    @abstractmethod
    def add_session(self, session: TutoringSession) -> TutoringSession: ...

    @abstractmethod
    def save_session(self, session: TutoringSession) -> TutoringSession: ...

    # Reviews
    @abstractmethod
    def list_reviews(self) -> list[Review]: ...

    @abstractmethod
    def add_review(self, review: Review) -> Review: ...

    # Tutor applications, one per user
    @abstractmethod
    def get_tutor_application(self, user_id: int) -> TutorApplication | None: ...

    @abstractmethod
    def list_tutor_applications(self) -> list[TutorApplication]: ...

    @abstractmethod
    def save_tutor_application(self, application: TutorApplication) -> TutorApplication: ...

    # System configuration
    @abstractmethod
    def get_system_config(self, key: str) -> SystemConfig | None: ...

    @abstractmethod
    def list_system_configs(self) -> list[SystemConfig]: ...

    @abstractmethod
    def save_system_config(self, config: SystemConfig) -> SystemConfig: ...

    # Footer content singleton
    @abstractmethod
    def get_footer_content(self) -> FooterContent | None: ...

    @abstractmethod
    def save_footer_content(self, content: FooterContent) -> FooterContent: ...


class MemStorage(Storage):
    """Process-local store backed by dicts. Nothing survives a restart."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._sessions: dict[int, TutoringSession] = {}
        self._reviews: dict[int, Review] = {}
        self._applications: dict[int, TutorApplication] = {}
        self._configs: dict[str, SystemConfig] = {}
        self._footer: FooterContent | None = None
        self._next_user_id = 1
        self._next_session_id = 1
        self._next_review_id = 1
        self._next_config_id = 1

    @staticmethod
    def _copy(record):
        return copy.deepcopy(record)

    def get_user(self, user_id: int) -> User | None:
        user = self._users.get(user_id)
        return self._copy(user) if user is not None else None

    def list_users(self) -> list[User]:
        return [self._copy(u) for u in self._users.values()]

    def add_user(self, user: User) -> User:
        user = self._copy(user)
        user.id = self._next_user_id
        self._next_user_id += 1
        self._users[user.id] = user
        return self._copy(user)

    def save_user(self, user: User) -> User:
        self._users[user.id] = self._copy(user)
        return self._copy(user)

    def delete_user(self, user_id: int) -> bool:
        return self._users.pop(user_id, None) is not None

    def get_session(self, session_id: int) -> TutoringSession | None:
        session = self._sessions.get(session_id)
        return self._copy(session) if session is not None else None

    def list_sessions(self) -> list[TutoringSession]:
        return [self._copy(s) for s in self._sessions.values()]

    def add_session(self, session: TutoringSession) -> TutoringSession:
        session = self._copy(session)
        session.id = self._next_session_id
        self._next_session_id += 1
        self._sessions[session.id] = session
        return self._copy(session)

    def save_session(self, session: TutoringSession) -> TutoringSession:
        self._sessions[session.id] = self._copy(session)
        return self._copy(session)

    def list_reviews(self) -> list[Review]:
        return [self._copy(r) for r in self._reviews.values()]

    def add_review(self, review: Review) -> Review:
        review = self._copy(review)
        review.id = self._next_review_id
        self._next_review_id += 1
        self._reviews[review.id] = review
        return self._copy(review)

    def get_tutor_application(self, user_id: int) -> TutorApplication | None:
        application = self._applications.get(user_id)
        return self._copy(application) if application is not None else None

    def list_tutor_applications(self) -> list[TutorApplication]:
        return [self._copy(a) for a in self._applications.values()]

    def save_tutor_application(self, application: TutorApplication) -> TutorApplication:
        self._applications[application.user_id] = self._copy(application)
        return self._copy(application)

    def get_system_config(self, key: str) -> SystemConfig | None:
        config = self._configs.get(key)
        return self._copy(config) if config is not None else None

    def list_system_configs(self) -> list[SystemConfig]:
        return [self._copy(c) for c in self._configs.values()]

    def save_system_config(self, config: SystemConfig) -> SystemConfig:
        config = self._copy(config)
        existing = self._configs.get(config.key)
        if existing is not None:
            config.id = existing.id
        else:
            config.id = self._next_config_id
            self._next_config_id += 1
        self._configs[config.key] = config
        return self._copy(config)

    def get_footer_content(self) -> FooterContent | None:
        return self._copy(self._footer) if self._footer is not None else None

    def save_footer_content(self, content: FooterContent) -> FooterContent:
        self._footer = self._copy(content)
        return self._copy(content)


def get_storage() -> Storage:
    """Return the storage bound to the current application."""
    return current_app.extensions[STORAGE_EXTENSION_KEY]
