# mentorlink/services/user_directory.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import ErrorMessages
from ..exceptions import DependencyError, NotFoundError, ValidationError
from ..models import Mentor, Parent, Student

logger = logging.getLogger(__name__)

class UserDirectory:
    """Lookups of mentor, parent and student records by id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_mentor(self, mentor_id: str) -> Mentor:
        return await self._get_or_404(Mentor, mentor_id, ErrorMessages.MENTOR_NOT_FOUND)

    async def find_parent(self, parent_id: str) -> Parent:
        return await self._get_or_404(Parent, parent_id, ErrorMessages.PARENT_NOT_FOUND)

    async def find_student(self, student_id: str) -> Student:
        return await self._get_or_404(Student, student_id, ErrorMessages.STUDENT_NOT_FOUND)

    async def update_mentor(self, mentor_id: str, patch: Dict[str, Any]) -> Mentor:
        """Applies a partial update to a mentor record"""
        mentor = await self.find_mentor(mentor_id)
        for key, value in patch.items():
            if key == "id" or key not in Mentor.__table__.columns.keys():
                raise ValidationError(f"Unknown mentor field: {key}")
            setattr(mentor, key, value)
        mentor.updated_at = datetime.now(timezone.utc)

        try:
            self.db.add(mentor)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error updating mentor {mentor_id}: {e}")
            raise DependencyError("Database error occurred while updating mentor profile") from e
        return mentor

    async def _get_or_404(self, model_class, entity_id: str, not_found_message: str):
        try:
            result = await self.db.execute(
                select(model_class)
                .where(model_class.id == entity_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error loading {model_class.__name__} {entity_id}: {e}")
            raise DependencyError(ErrorMessages.DATABASE_ERROR) from e
        entity = result.scalars().first()
        if entity is None:
            raise NotFoundError(f"{not_found_message}: {entity_id}")
        return entity
