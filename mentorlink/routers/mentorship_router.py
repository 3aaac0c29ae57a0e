# mentorlink/routers/mentorship_router.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from ..services import MentorshipService, MentorshipRequest, UserDirectory
from ..dependencies.service_dependencies import get_mentorship_service, get_user_directory
from ..utils.response_enricher import ResponseEnricher
from ..schemas import MentorshipRequestCreate, MentorshipResponse, SessionCreate
from ..constants import ErrorMessages
from ..exceptions import BusinessLogicError, ValidationError

router = APIRouter(prefix="/api", tags=["mentorship"])

@router.post("/mentorships", response_model=MentorshipResponse, status_code=201)
async def send_request(
    payload: MentorshipRequestCreate,
    directory: UserDirectory = Depends(get_user_directory),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Create a mentorship request on behalf of a parent's student"""
    try:
        parent = await directory.find_parent(payload.parent_id)
        student = await directory.find_student(payload.student_id)
        if student.parent_id != parent.id:
            raise ValidationError(f"{ErrorMessages.STUDENT_NOT_IN_ROSTER}: {payload.student_id}")
        mentor = await directory.find_mentor(payload.mentor_id)
        mentorship = await mentorship_service.send_request(
            MentorshipRequest(parent=parent, student=student, mentor=mentor, message=payload.message)
        )
        return ResponseEnricher.enrich_single_mentorship(mentorship)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/mentorships/{mentorship_id}/accept", response_model=MentorshipResponse)
async def accept_request(
    mentorship_id: str,
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Accept a pending mentorship request"""
    try:
        await mentorship_service.accept_request(mentorship_id)
        mentorship = await mentorship_service.get_mentorship(mentorship_id)
        return ResponseEnricher.enrich_single_mentorship(mentorship)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/mentorships/{mentorship_id}/reject", response_model=MentorshipResponse)
async def reject_request(
    mentorship_id: str,
    mentorship_service: MentorshipService = Depends(get_mentorship_service),
    notify: bool = Query(True)
):
    """Reject a pending mentorship request"""
    try:
        mentorship = await mentorship_service.reject_request(mentorship_id, notify=notify)
        return ResponseEnricher.enrich_single_mentorship(mentorship)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/mentorships/{mentorship_id}/archive", response_model=MentorshipResponse)
async def archive_mentorship(
    mentorship_id: str,
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Archive an active mentorship"""
    try:
        mentorship = await mentorship_service.archive_mentorship(mentorship_id)
        return ResponseEnricher.enrich_single_mentorship(mentorship)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/mentorships/{mentorship_id}/sessions", response_model=MentorshipResponse, status_code=201)
async def add_session(
    mentorship_id: str,
    session: SessionCreate,
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Record a session on an active mentorship"""
    try:
        mentorship = await mentorship_service.add_session_to_mentorship(session, mentorship_id)
        return ResponseEnricher.enrich_single_mentorship(mentorship)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/users/{user_id}/mentorships", response_model=List[MentorshipResponse])
async def get_current_mentorships(
    user_id: str,
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Get every mentorship a user takes part in"""
    try:
        mentorships = await mentorship_service.get_current_mentorships(user_id)
        return ResponseEnricher.enrich_mentorships(mentorships)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
