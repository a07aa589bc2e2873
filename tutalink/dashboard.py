"""Admin dashboard summary, recomputed from a full scan on every call."""
from __future__ import annotations

from .domain import ApplicationStatus, PaymentStatus, Role, SessionStatus
from .reviews import average_rating
from .storage import Storage


def dashboard_summary(storage: Storage) -> dict[str, object]:
    users = storage.list_users()
    sessions = storage.list_sessions()
    reviews = storage.list_reviews()
    applications = storage.list_tutor_applications()

    return {
        "totalUsers": len(users),
        # Counted by role alone; approval is not considered.
        "totalTutors": sum(1 for u in users if u.role is Role.TUTOR),
        "totalLearners": sum(1 for u in users if u.role is Role.LEARNER),
        "totalSessions": len(sessions),
        "completedSessions": sum(1 for s in sessions if s.status is SessionStatus.COMPLETED),
        "totalRevenue": sum(s.amount for s in sessions if s.payment_status is PaymentStatus.PAID),
        "pendingApplications": sum(
            1 for a in applications if a.status is ApplicationStatus.PENDING
        ),
        "totalReviews": len(reviews),
        "averageRating": round(average_rating(reviews), 1),
    }
