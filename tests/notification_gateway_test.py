import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from mentorlink.constants import NotificationTemplate
from mentorlink.exceptions import DependencyError
from mentorlink.models import CommunicationPreference
from mentorlink.services.notification_gateway import NotificationGateway, TemplatedNotificationGateway


class TestNotificationGateway(unittest.TestCase):
    def test_gateway_is_abstract(self):
        with self.assertRaises(TypeError):
            NotificationGateway()


class TestTemplatedNotificationGateway(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.email_delivery = AsyncMock()
        self.sms_delivery = AsyncMock()
        self.gateway = TemplatedNotificationGateway(
            email_delivery=self.email_delivery,
            sms_delivery=self.sms_delivery,
        )
        self.mentor = SimpleNamespace(
            id="mentor-1",
            name="Ben Bitdiddle",
            email="ben@example.com",
            phone=None,
            communication_preference=CommunicationPreference.EMAIL,
        )
        self.parent = SimpleNamespace(
            id="parent-1",
            name="Alyssa P Hacker",
            email="alyssa@example.com",
            phone="15005550006",
            communication_preference=CommunicationPreference.SMS,
        )
        self.student = SimpleNamespace(id="student-1", name="Pork Bun", grade_level="5")
        self.context = {"mentor": self.mentor, "parent": self.parent, "student": self.student}

    async def test_request_mentor_by_email(self):
        """Test the request template carries the parent's message to the mentor's inbox."""
        await self.gateway.send_message(
            self.mentor,
            NotificationTemplate.REQUEST_MENTOR,
            {**self.context, "message": "Could you help with algebra?"},
        )

        self.sms_delivery.assert_not_awaited()
        message = self.email_delivery.await_args.args[0]
        self.assertEqual(message.to, "ben@example.com")
        self.assertEqual(message.channel, CommunicationPreference.EMAIL)
        self.assertEqual(message.subject, "New mentorship request for Pork Bun")
        self.assertIn("Could you help with algebra?", message.body)
        self.assertIn("Alyssa P Hacker", message.body)

    async def test_accepted_parent_by_sms(self):
        """Test SMS recipients are reached on their phone."""
        await self.gateway.send_message(self.parent, NotificationTemplate.ACCEPTED_PARENT, self.context)

        self.email_delivery.assert_not_awaited()
        message = self.sms_delivery.await_args.args[0]
        self.assertEqual(message.to, "15005550006")
        self.assertIn("ben@example.com", message.body)

    async def test_every_template_renders(self):
        context = {**self.context, "message": "Hello"}
        for template_id in NotificationTemplate:
            with self.subTest(template_id=template_id):
                message = self.gateway.render(self.mentor, template_id, context)
                self.assertTrue(message.subject)
                self.assertTrue(message.body)

    async def test_missing_context_raises_dependency_error(self):
        with self.assertRaises(DependencyError):
            await self.gateway.send_message(self.mentor, NotificationTemplate.REQUEST_MENTOR, self.context)

    async def test_missing_address_raises_dependency_error(self):
        self.parent.phone = None

        with self.assertRaises(DependencyError):
            await self.gateway.send_message(self.parent, NotificationTemplate.REJECTED_PARENT, self.context)

    async def test_delivery_failure_raises_dependency_error(self):
        self.email_delivery.side_effect = ConnectionError("smtp unreachable")

        with self.assertRaises(DependencyError) as ctx:
            await self.gateway.send_message(self.mentor, NotificationTemplate.REJECTED_MENTOR, self.context)

        self.assertIn("smtp unreachable", str(ctx.exception))

    async def test_disabled_gateway_sends_nothing(self):
        gateway = TemplatedNotificationGateway(email_delivery=self.email_delivery, enabled=False)

        await gateway.send_message(self.mentor, NotificationTemplate.REJECTED_MENTOR, self.context)

        self.email_delivery.assert_not_awaited()

    async def test_default_delivery_logs(self):
        gateway = TemplatedNotificationGateway()

        with self.assertLogs("mentorlink.services.notification_gateway", level="INFO") as logs:
            await gateway.send_message(self.mentor, NotificationTemplate.REJECTED_MENTOR, self.context)

        self.assertIn("ben@example.com", logs.output[0])


if __name__ == "__main__":
    unittest.main()
