from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from .models import MentorshipState

# --- Input Models ---

class MentorshipRequestCreate(BaseModel):
    parent_id: str = Field(..., description="The parent making the request.")
    student_id: str = Field(..., description="The parent's student the request is for.")
    mentor_id: str = Field(..., description="The mentor being asked.")
    message: str = Field(..., description="Message passed on to the mentor.")

class SessionCreate(BaseModel):
    # Range is checked by the service so out-of-range ratings surface as a 400
    rating: float = Field(..., description="Rating of the session, between 0 and 1.")
    notes: Optional[str] = Field(None, description="Optional notes about the session.")
    held_at: Optional[datetime] = Field(None, description="When the session took place.")

# --- Output Models ---

class SessionResponse(BaseModel):
    position: int
    rating: float
    notes: Optional[str]
    held_at: Optional[datetime]

    model_config = {
        "from_attributes": True,
    }

class MentorshipResponse(BaseModel):
    id: str
    state: MentorshipState
    message: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    mentor_id: Optional[str]
    mentor_name: Optional[str] = None # Populated from the resolved mentor when available
    parent_id: Optional[str]
    parent_name: Optional[str] = None
    student_id: Optional[str]
    student_name: Optional[str] = None
    sessions: List[SessionResponse] = []

    model_config = {
        "from_attributes": True,
    }
