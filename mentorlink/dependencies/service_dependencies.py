# mentorlink/dependencies/service_dependencies.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import get_settings
from ..database import get_db
from ..services.mentorship_service import MentorshipService
from ..services.mentorship_store import MentorshipStore
from ..services.notification_gateway import NotificationGateway, TemplatedNotificationGateway
from ..services.user_directory import UserDirectory

def get_notification_gateway() -> NotificationGateway:
    return TemplatedNotificationGateway(enabled=get_settings().NOTIFICATIONS_ENABLED)

def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)

def get_mentorship_service(
    db: AsyncSession = Depends(get_db),
    directory: UserDirectory = Depends(get_user_directory),
    gateway: NotificationGateway = Depends(get_notification_gateway),
) -> MentorshipService:
    return MentorshipService(store=MentorshipStore(db), directory=directory, gateway=gateway, settings=get_settings())
