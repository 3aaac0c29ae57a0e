# mentorlink/services/__init__.py
from .mentorship_service import MentorshipService, MentorshipRequest, MentorshipParties
from .mentorship_store import MentorshipStore
from .notification_gateway import NotificationGateway, TemplatedNotificationGateway
from .user_directory import UserDirectory

__all__ = [
    "MentorshipService",
    "MentorshipRequest",
    "MentorshipParties",
    "MentorshipStore",
    "NotificationGateway",
    "TemplatedNotificationGateway",
    "UserDirectory",
]
