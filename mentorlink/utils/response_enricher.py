# mentorlink/utils/response_enricher.py
from typing import Dict, Any, List
from ..models import Mentorship
from ..schemas import MentorshipResponse
from .references import name_of, reference_of

class ResponseEnricher:
    @staticmethod
    def enrich_mentorships(mentorships: List[Mentorship]) -> List[Dict[str, Any]]:
        """Enriches mentorships with mentor/parent/student names"""
        enriched = []
        for mentorship in mentorships:
            data = MentorshipResponse.model_validate(mentorship).model_dump()
            data['mentor_name'] = name_of(reference_of(mentorship, "mentor"))
            data['parent_name'] = name_of(reference_of(mentorship, "parent"))
            data['student_name'] = name_of(reference_of(mentorship, "student"))
            enriched.append(data)
        return enriched

    @staticmethod
    def enrich_single_mentorship(mentorship: Mentorship) -> Dict[str, Any]:
        """Enriches a single mentorship"""
        return ResponseEnricher.enrich_mentorships([mentorship])[0]
