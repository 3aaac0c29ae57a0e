# mentorlink/notification_templates.py
from .constants import NotificationTemplate

# Subject and body for every template; rendered with Jinja2 against
# {mentor, parent, student} and, for requests, {message}.
TEMPLATES = {
    NotificationTemplate.REQUEST_MENTOR: (
        "New mentorship request for {{ student.name }}",
        "Hi {{ mentor.name }},\n\n"
        "{{ parent.name }} would like you to mentor {{ student.name }} (grade {{ student.grade_level }}).\n\n"
        "Their message:\n{{ message }}\n\n"
        "Sign in to accept or decline the request.",
    ),
    NotificationTemplate.REQUEST_PARENT: (
        "Your request to {{ mentor.name }} was sent",
        "Hi {{ parent.name }},\n\n"
        "We sent your mentorship request for {{ student.name }} to {{ mentor.name }}. "
        "We'll let you know as soon as they respond.",
    ),
    NotificationTemplate.ACCEPTED_MENTOR: (
        "You are now mentoring {{ student.name }}",
        "Hi {{ mentor.name }},\n\n"
        "Thanks for accepting {{ student.name }}. You can reach {{ parent.name }} at {{ parent.email }}"
        "{% if parent.phone %} or {{ parent.phone }}{% endif %}.",
    ),
    NotificationTemplate.ACCEPTED_PARENT: (
        "{{ mentor.name }} accepted your request",
        "Hi {{ parent.name }},\n\n"
        "{{ mentor.name }} will be mentoring {{ student.name }}. You can reach them at {{ mentor.email }}"
        "{% if mentor.phone %} or {{ mentor.phone }}{% endif %}.",
    ),
    NotificationTemplate.REJECTED_MENTOR: (
        "You declined the request for {{ student.name }}",
        "Hi {{ mentor.name }},\n\n"
        "We let {{ parent.name }} know that you are unable to mentor {{ student.name }} right now.",
    ),
    NotificationTemplate.REJECTED_PARENT: (
        "Update on your request to {{ mentor.name }}",
        "Hi {{ parent.name }},\n\n"
        "{{ mentor.name }} is unable to mentor {{ student.name }} at this time. "
        "You are welcome to reach out to another mentor.",
    ),
}
