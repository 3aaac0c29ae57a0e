# mentorlink/services/mentorship_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import Settings, get_settings
from ..constants import BusinessRules, ErrorMessages, NotificationTemplate
from ..exceptions import BusinessLogicError, DataIntegrityError, InvalidStateError, NotFoundError, ValidationError
from ..models import Mentor, Mentorship, MentorshipState, Parent, Student
from ..utils.references import Resolved, reference_of
from .mentorship_store import MentorshipStore
from .notification_gateway import NotificationGateway
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

@dataclass
class MentorshipRequest:
    parent: Parent
    student: Student
    mentor: Mentor
    message: str

@dataclass(frozen=True)
class MentorshipParties:
    mentor: Mentor
    parent: Parent
    student: Student

    def as_context(self) -> Dict[str, Any]:
        return {"mentor": self.mentor, "parent": self.parent, "student": self.student}

class MentorshipService:
    """
    Creates, updates and archives mentorships. Not responsible for checking that the
    caller is the right kind of user, nor for talking to email / SMS providers.

    Only a parent requests a mentorship, on behalf of one of their students. A student
    can have many requests in flight but only one ACTIVE mentorship. A mentor may have
    several ACTIVE mentorships and is the one who accepts or rejects requests.

    Mentorships are archived when they end, never deleted, so engagement history stays
    available.
    """

    def __init__(
        self,
        store: MentorshipStore,
        directory: UserDirectory,
        gateway: NotificationGateway,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.directory = directory
        self.gateway = gateway
        self.settings = settings or get_settings()

    async def send_request(self, request: MentorshipRequest) -> Mentorship:
        """Creates a PENDING mentorship, notifies the mentor and confirms to the parent"""
        self._validate_request(request)
        await self._check_request_guards(request)

        mentorship = await self.store.create(
            Mentorship(
                mentor_id=request.mentor.id,
                parent_id=request.parent.id,
                student_id=request.student.id,
                message=request.message,
            )
        )
        logger.info(f"Mentorship {mentorship.id} requested by parent {request.parent.id} for student {request.student.id} with mentor {request.mentor.id}")

        context = {
            "mentor": request.mentor,
            "parent": request.parent,
            "student": request.student,
            "message": request.message,
        }
        mentor = await self.directory.find_mentor(request.mentor.id)
        await self._notify(mentor, NotificationTemplate.REQUEST_MENTOR, context)
        await self.directory.update_mentor(mentor.id, {"last_request_time": datetime.now(timezone.utc)})
        parent = await self.directory.find_parent(request.parent.id)
        await self._notify(parent, NotificationTemplate.REQUEST_PARENT, context)
        return mentorship

    async def accept_request(self, mentorship_id: str) -> None:
        """
        Accepts a PENDING mentorship on behalf of its mentor. A mentorship is accepted at
        most once; a new request is needed to renew an archived one.
        """
        mentorship = await self.get_mentorship(mentorship_id)
        self._require_state(mentorship, MentorshipState.PENDING, "accept")
        student_id = mentorship.student_id

        accepted = await self.store.transition(
            mentorship_id,
            MentorshipState.PENDING,
            sole_active_for_student=student_id,
            state=MentorshipState.ACTIVE,
            start_date=datetime.now(timezone.utc),
        )
        if not accepted:
            current = await self.get_mentorship(mentorship_id)
            if current.state == MentorshipState.PENDING:
                raise InvalidStateError(f"{ErrorMessages.STUDENT_ALREADY_MENTORED}: {student_id}")
            raise InvalidStateError(f"Mentorship {mentorship_id} is no longer pending")
        logger.info(f"Mentorship {mentorship_id} accepted")

        mentorship = await self.get_mentorship(mentorship_id)
        if self.settings.AUTO_REJECT_PENDING_ON_ACCEPT:
            await self._reject_pending_siblings(mentorship)

        await self._notify_parties(mentorship, NotificationTemplate.ACCEPTED_MENTOR, NotificationTemplate.ACCEPTED_PARENT)

    async def reject_request(self, mentorship_id: str, notify: bool = True) -> Mentorship:
        """
        Rejects a PENDING mentorship on behalf of its mentor. Rejection is final; a new
        request has to be sent to reconsider.
        """
        mentorship = await self.get_mentorship(mentorship_id)
        self._require_state(mentorship, MentorshipState.PENDING, "reject")

        if not await self.store.transition(mentorship_id, MentorshipState.PENDING, state=MentorshipState.REJECTED):
            raise InvalidStateError(f"Mentorship {mentorship_id} is no longer pending")
        logger.info(f"Mentorship {mentorship_id} rejected")

        mentorship = await self.get_mentorship(mentorship_id)
        if notify:
            await self._notify_parties(mentorship, NotificationTemplate.REJECTED_MENTOR, NotificationTemplate.REJECTED_PARENT)
        return mentorship

    async def archive_mentorship(self, mentorship_id: str) -> Mentorship:
        """Ends an ACTIVE mentorship. Nobody is notified."""
        mentorship = await self.get_mentorship(mentorship_id)
        self._require_state(mentorship, MentorshipState.ACTIVE, "archive")

        archived = await self.store.transition(
            mentorship_id,
            MentorshipState.ACTIVE,
            state=MentorshipState.ARCHIVED,
            end_date=datetime.now(timezone.utc),
        )
        if not archived:
            raise InvalidStateError(f"Mentorship {mentorship_id} is no longer active")
        logger.info(f"Mentorship {mentorship_id} archived")
        return await self.get_mentorship(mentorship_id)

    async def add_session_to_mentorship(self, session, mentorship_id: str) -> Mentorship:
        """A session can only be added to an ACTIVE mentorship."""
        rating = session.rating
        if rating is None or not BusinessRules.MIN_SESSION_RATING <= rating <= BusinessRules.MAX_SESSION_RATING:
            raise ValidationError(f"Session rating out of range: {rating}")

        mentorship = await self.get_mentorship(mentorship_id)
        self._require_state(mentorship, MentorshipState.ACTIVE, "add a session to")

        appended = await self.store.append_session(
            mentorship_id,
            rating=rating,
            notes=getattr(session, "notes", None),
            held_at=getattr(session, "held_at", None),
        )
        if not appended:
            raise InvalidStateError(f"Mentorship {mentorship_id} is no longer active")
        return await self.get_mentorship(mentorship_id)

    async def get_current_mentorships(self, user_id: str) -> List[Mentorship]:
        """
        Returns every mentorship the user takes part in as parent, mentor or student.

        A user may have been deleted since a mentorship was made; such mentorships are
        removed from the store and left out of the result.
        """
        current = []
        for mentorship in await self.store.find(involving=user_id):
            if mentorship.mentor is None or mentorship.parent is None or mentorship.student is None:
                logger.warning(f"Removing mentorship {mentorship.id}: a referenced user no longer exists")
                await self.store.delete_one(mentorship.id)
                continue
            current.append(mentorship)
        return current

    async def get_mentorship(self, mentorship_id: str) -> Mentorship:
        mentorship = await self.store.find_by_id(mentorship_id)
        if mentorship is None:
            raise NotFoundError(f"{ErrorMessages.MENTORSHIP_NOT_FOUND}: {mentorship_id}")
        return mentorship

    async def get_users_from_populated_mentorship(self, mentorship: Mentorship) -> MentorshipParties:
        """
        Returns full mentor, parent and student records for a mentorship whose party
        fields may be loaded records or bare ids.

        Bare ids are looked up in the directory; a bare student id is looked up in the
        parent's roster.

        Raises:
            DataIntegrityError: The student is not on the parent's roster.
        """
        mentor_ref = reference_of(mentorship, "mentor")
        parent_ref = reference_of(mentorship, "parent")
        student_ref = reference_of(mentorship, "student")

        if isinstance(mentor_ref, Resolved):
            mentor = mentor_ref.record
        else:
            mentor = await self.directory.find_mentor(mentor_ref.value)

        if isinstance(parent_ref, Resolved):
            parent = parent_ref.record
        else:
            parent = await self.directory.find_parent(parent_ref.value)

        if isinstance(student_ref, Resolved):
            student = student_ref.record
        else:
            student = next((s for s in parent.students if s.id == student_ref.value), None)
            if student is None:
                raise DataIntegrityError(f"{ErrorMessages.STUDENT_NOT_IN_ROSTER}: {student_ref.value}")

        return MentorshipParties(mentor=mentor, parent=parent, student=student)

    def _validate_request(self, request: MentorshipRequest):
        for role in ("mentor", "parent", "student"):
            party = getattr(request, role)
            if party is None or party.id is None:
                name = getattr(party, "name", None)
                raise ValidationError(f"{role.title()}: {name} has no id")
        if not request.message or not request.message.strip():
            raise ValidationError(ErrorMessages.EMPTY_MESSAGE)

    async def _check_request_guards(self, request: MentorshipRequest):
        # First match wins. Unless ENFORCE_REQUEST_GUARDS is set these are only logged.
        if await self._is_student_being_mentored(request.student):
            self._guard(InvalidStateError, ErrorMessages.STUDENT_ALREADY_MENTORED, request)
        elif await self._is_duplicate(request):
            self._guard(ValidationError, ErrorMessages.DUPLICATE_REQUEST, request)
        elif await self._has_student_been_rejected_by_mentor(request.student, request.mentor):
            self._guard(InvalidStateError, ErrorMessages.REJECTED_BY_MENTOR, request)

    def _guard(self, error_class, message: str, request: MentorshipRequest):
        if self.settings.ENFORCE_REQUEST_GUARDS:
            raise error_class(message)
        logger.warning(f"{message} (student {request.student.id}, mentor {request.mentor.id}); creating request anyway")

    async def _is_student_being_mentored(self, student: Student) -> bool:
        active = await self.store.find(populate=False, student_id=student.id, state=MentorshipState.ACTIVE)
        return len(active) > 0

    async def _is_duplicate(self, request: MentorshipRequest) -> bool:
        pending = await self.store.find(
            populate=False,
            parent_id=request.parent.id,
            student_id=request.student.id,
            mentor_id=request.mentor.id,
            state=MentorshipState.PENDING,
        )
        return len(pending) > 0

    async def _has_student_been_rejected_by_mentor(self, student: Student, mentor: Mentor) -> bool:
        rejected = await self.store.find(
            populate=False,
            student_id=student.id,
            mentor_id=mentor.id,
            state=MentorshipState.REJECTED,
        )
        return len(rejected) > 0

    async def _reject_pending_siblings(self, mentorship: Mentorship):
        siblings = await self.store.find(populate=False, student_id=mentorship.student_id, state=MentorshipState.PENDING)
        for sibling in siblings:
            if sibling.id == mentorship.id:
                continue
            try:
                await self.reject_request(sibling.id, notify=False)
            except InvalidStateError as e:
                # Someone else answered it first
                logger.info(f"Skipping auto-rejection of mentorship {sibling.id}: {e}")

    def _require_state(self, mentorship: Mentorship, expected: MentorshipState, action: str):
        if mentorship.state != expected:
            raise InvalidStateError(
                f"Cannot {action} mentorship {mentorship.id} that is not {expected.value.lower()} (current: {mentorship.state.value})"
            )

    async def _notify(self, recipient, template_id: NotificationTemplate, context: Dict[str, Any]):
        # Notifications are best-effort; lifecycle changes never depend on them
        try:
            await self.gateway.send_message(recipient, template_id, context)
        except Exception as e:
            logger.warning(f"Failed to send {template_id.value} to {recipient.id}: {e}")

    async def _notify_parties(self, mentorship: Mentorship, mentor_template: NotificationTemplate, parent_template: NotificationTemplate):
        # Runs after the transition is committed, so unresolvable parties only skip the notifications
        try:
            parties = await self.get_users_from_populated_mentorship(mentorship)
        except BusinessLogicError as e:
            logger.warning(f"Not notifying parties of mentorship {mentorship.id}: {e}")
            return
        await self._notify(parties.mentor, mentor_template, parties.as_context())
        await self._notify(parties.parent, parent_template, parties.as_context())
