# mentorlink/constants.py
from enum import Enum

class ErrorMessages:
    MENTOR_NOT_FOUND = "Mentor not found"
    PARENT_NOT_FOUND = "Parent not found"
    STUDENT_NOT_FOUND = "Student not found"
    MENTORSHIP_NOT_FOUND = "Mentorship not found"
    STUDENT_NOT_IN_ROSTER = "Unable to find student in parent's roster"
    EMPTY_MESSAGE = "Please specify a message"
    STUDENT_ALREADY_MENTORED = "Student already has an active mentorship"
    DUPLICATE_REQUEST = "A pending request already exists for this parent, student and mentor"
    REJECTED_BY_MENTOR = "Student was previously rejected by this mentor"
    DATABASE_ERROR = "Database error occurred"

class BusinessRules:
    MIN_SESSION_RATING = 0.0
    MAX_SESSION_RATING = 1.0

class NotificationTemplate(str, Enum):
    REQUEST_MENTOR = "mentorship_request_mentor"
    REQUEST_PARENT = "mentorship_request_parent"
    ACCEPTED_MENTOR = "mentorship_accepted_mentor"
    ACCEPTED_PARENT = "mentorship_accepted_parent"
    REJECTED_MENTOR = "mentorship_rejected_mentor"
    REJECTED_PARENT = "mentorship_rejected_parent"
