# mentorlink/services/notification_gateway.py
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from ..constants import NotificationTemplate
from ..exceptions import DependencyError
from ..models import CommunicationPreference
from ..notification_templates import TEMPLATES

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class OutboundMessage:
    template_id: NotificationTemplate
    channel: CommunicationPreference
    to: str
    subject: str
    body: str

Delivery = Callable[[OutboundMessage], Awaitable[None]]

async def log_delivery(message: OutboundMessage) -> None:
    """Default delivery: records the message instead of sending it."""
    logger.info(f"[{message.channel.value}] to={message.to} template={message.template_id.value} subject={message.subject!r}")

class NotificationGateway(ABC):
    """Sends a templated message to a mentor or parent."""

    @abstractmethod
    async def send_message(self, recipient: Any, template_id: NotificationTemplate, context: Dict[str, Any]) -> None:
        ...

class TemplatedNotificationGateway(NotificationGateway):
    """
    Renders Jinja2 templates and hands the result to a delivery callable picked by
    the recipient's communication preference.

    Rendering and delivery failures are raised as DependencyError; it is up to the
    caller whether a failed notification matters.
    """

    def __init__(
        self,
        email_delivery: Optional[Delivery] = None,
        sms_delivery: Optional[Delivery] = None,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self.deliveries = {
            CommunicationPreference.EMAIL: email_delivery or log_delivery,
            CommunicationPreference.SMS: sms_delivery or log_delivery,
        }
        sources = {}
        for template_id, (subject, body) in TEMPLATES.items():
            sources[f"{template_id.value}.subject"] = subject
            sources[f"{template_id.value}.body"] = body
        self.env = Environment(loader=DictLoader(sources), undefined=StrictUndefined, autoescape=False)

    def render(self, recipient: Any, template_id: NotificationTemplate, context: Dict[str, Any]) -> OutboundMessage:
        channel = CommunicationPreference(recipient.communication_preference)
        to = recipient.phone if channel == CommunicationPreference.SMS else recipient.email
        if not to:
            raise DependencyError(f"Recipient {recipient.id} has no address for {channel.value}")
        try:
            subject = self.env.get_template(f"{template_id.value}.subject").render(**context)
            body = self.env.get_template(f"{template_id.value}.body").render(**context)
        except TemplateError as e:
            raise DependencyError(f"Failed to render notification {template_id.value}: {e}") from e
        return OutboundMessage(template_id=template_id, channel=channel, to=to, subject=subject, body=body)

    async def send_message(self, recipient: Any, template_id: NotificationTemplate, context: Dict[str, Any]) -> None:
        if not self.enabled:
            logger.debug(f"Notifications disabled, skipping {template_id.value} for {recipient.id}")
            return
        message = self.render(recipient, template_id, context)
        try:
            await self.deliveries[message.channel](message)
        except Exception as e:
            raise DependencyError(f"Failed to deliver {template_id.value} to {recipient.id}: {e}") from e
