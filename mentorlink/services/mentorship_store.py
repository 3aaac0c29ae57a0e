# mentorlink/services/mentorship_store.py
import logging
from typing import Any, Optional

from sqlalchemy import DateTime, Float, String, Text, exists, func, insert, literal, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from ..constants import ErrorMessages
from ..exceptions import DependencyError, InvalidStateError
from ..models import Mentorship, MentorshipSession, MentorshipState, new_id

logger = logging.getLogger(__name__)

def _party_loaders():
    return (
        selectinload(Mentorship.mentor),
        selectinload(Mentorship.parent),
        selectinload(Mentorship.student),
    )

class MentorshipStore:
    """
    Persistence for mentorship records.

    State changes go through ``transition`` which only writes when the row is still
    in the expected state, so two concurrent accepts cannot both succeed.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, mentorship: Mentorship) -> Mentorship:
        """Persists a new mentorship in the PENDING state with no sessions."""
        if mentorship.id is None:
            mentorship.id = new_id()
        mentorship.state = MentorshipState.PENDING
        mentorship.start_date = None
        mentorship.end_date = None
        mentorship.sessions = []
        return await self.save(mentorship)

    async def save(self, mentorship: Mentorship) -> Mentorship:
        self.db.add(mentorship)
        await self._commit(f"saving mentorship {mentorship.id}")
        return await self.find_by_id(mentorship.id)

    async def find_by_id(self, mentorship_id: str, populate: bool = True) -> Optional[Mentorship]:
        stmt = (
            select(Mentorship)
            .where(Mentorship.id == mentorship_id)
            .execution_options(populate_existing=True)
        )
        if populate:
            stmt = stmt.options(*_party_loaders())
        result = await self._execute(stmt, f"loading mentorship {mentorship_id}")
        return result.scalars().first()

    async def find(self, populate: bool = True, involving: Optional[str] = None, **criteria: Any) -> list[Mentorship]:
        """
        Finds mentorships matching every column criterion, e.g. ``state=MentorshipState.PENDING``.

        Args:
            populate: Eagerly load mentor, parent and student.
            involving: A user id matched against the mentor, parent and student columns.
        """
        stmt = select(Mentorship).execution_options(populate_existing=True).order_by(Mentorship.created_at)
        if involving is not None:
            stmt = stmt.where(
                or_(
                    Mentorship.mentor_id == involving,
                    Mentorship.parent_id == involving,
                    Mentorship.student_id == involving,
                )
            )
        for column, value in criteria.items():
            stmt = stmt.where(getattr(Mentorship, column) == value)
        if populate:
            stmt = stmt.options(*_party_loaders())
        result = await self._execute(stmt, "searching mentorships")
        return list(result.scalars().all())

    async def transition(
        self,
        mentorship_id: str,
        expected_state: MentorshipState,
        sole_active_for_student: Optional[str] = None,
        **changes: Any,
    ) -> bool:
        """
        Applies ``changes`` only if the mentorship is still in ``expected_state``.

        Args:
            sole_active_for_student: When given, the write also requires that this student
                has no other ACTIVE mentorship, checked in the same statement.

        Returns:
            bool: True if the row was updated, False if it was missing, had already moved on,
            or would have given the student a second ACTIVE mentorship.
        """
        target = changes.get("state")
        if target is not None and not expected_state.can_transition_to(target):
            raise InvalidStateError(f"Illegal transition {expected_state.value} -> {target.value}")

        conditions = [Mentorship.id == mentorship_id, Mentorship.state == expected_state]
        if sole_active_for_student is not None:
            other = aliased(Mentorship)
            conditions.append(
                ~exists()
                .where(
                    other.student_id == sole_active_for_student,
                    other.state == MentorshipState.ACTIVE,
                    other.id != mentorship_id,
                )
                .correlate(None)
            )
        stmt = (
            update(Mentorship)
            .where(*conditions)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except IntegrityError as e:
            # Lost to a concurrent write the unique index caught
            await self.db.rollback()
            logger.warning(f"Conflicting update of mentorship {mentorship_id}: {e}")
            return False
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error updating mentorship {mentorship_id}: {e}")
            raise DependencyError(ErrorMessages.DATABASE_ERROR) from e
        return result.rowcount == 1

    async def append_session(self, mentorship_id: str, rating: float, notes: Optional[str] = None, held_at=None) -> bool:
        """
        Appends a session at the end of the mentorship's sequence, only while it is ACTIVE.

        Returns:
            bool: True if the session was inserted.
        """
        next_position = (
            select(func.count(MentorshipSession.id))
            .where(MentorshipSession.mentorship_id == mentorship_id)
            .correlate(None)
            .scalar_subquery()
        )
        still_active = exists().where(
            Mentorship.id == mentorship_id,
            Mentorship.state == MentorshipState.ACTIVE,
        ).correlate(None)
        source = select(
            literal(mentorship_id, String),
            next_position,
            literal(rating, Float),
            literal(notes, Text),
            literal(held_at, DateTime(timezone=True)),
        ).where(still_active)
        stmt = insert(MentorshipSession.__table__).from_select(
            ["mentorship_id", "position", "rating", "notes", "held_at"], source
        )
        result = await self._execute(stmt, f"adding session to mentorship {mentorship_id}")
        await self._commit(f"adding session to mentorship {mentorship_id}")
        return result.rowcount == 1

    async def delete_one(self, mentorship_id: str) -> bool:
        mentorship = await self.find_by_id(mentorship_id, populate=False)
        if mentorship is None:
            return False
        try:
            # ORM delete so the owned sessions go with it
            await self.db.delete(mentorship)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error deleting mentorship {mentorship_id}: {e}")
            raise DependencyError(ErrorMessages.DATABASE_ERROR) from e
        await self._commit(f"deleting mentorship {mentorship_id}")
        return True

    async def _execute(self, stmt, action: str):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error {action}: {e}")
            raise DependencyError(ErrorMessages.DATABASE_ERROR) from e

    async def _commit(self, action: str):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error {action}: {e}")
            raise DependencyError(ErrorMessages.DATABASE_ERROR) from e
