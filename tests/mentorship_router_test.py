import unittest
from http import HTTPStatus

from httpx import ASGITransport, AsyncClient

from mentorlink.database import get_db
from mentorlink.dependencies.service_dependencies import get_notification_gateway
from mentorlink.main import app
from tests.base_test_lib import BaseTestLib


class TestMentorshipRouter(BaseTestLib):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.mentor = await self.create_mentor()
        self.parent, (self.student,) = await self.create_family()

        async def override_get_db():
            async with self.session_maker() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_notification_gateway] = lambda: self.gateway
        self.client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    async def asyncTearDown(self):
        await self.client.aclose()
        app.dependency_overrides.clear()
        await super().asyncTearDown()

    async def post_request(self, **overrides):
        payload = {
            "parent_id": self.parent.id,
            "student_id": self.student.id,
            "mentor_id": self.mentor.id,
            "message": "Hello",
            **overrides,
        }
        return await self.client.post("/api/mentorships", json=payload)

    async def test_lifecycle_over_http(self):
        """Test request, accept, session and archive through the API."""
        resp = await self.post_request()
        self.assertEqual(resp.status_code, HTTPStatus.CREATED, resp.text)
        body = resp.json()
        self.assertEqual(body["state"], "PENDING")
        self.assertEqual(body["sessions"], [])
        self.assertEqual(body["mentor_name"], "Ben Bitdiddle")
        self.assertEqual(body["student_name"], "Pork Bun")
        mentorship_id = body["id"]

        resp = await self.client.put(f"/api/mentorships/{mentorship_id}/accept")
        self.assertEqual(resp.status_code, HTTPStatus.OK, resp.text)
        self.assertEqual(resp.json()["state"], "ACTIVE")
        self.assertIsNotNone(resp.json()["start_date"])

        resp = await self.client.post(f"/api/mentorships/{mentorship_id}/sessions", json={"rating": 1.5})
        self.assertEqual(resp.status_code, HTTPStatus.BAD_REQUEST, resp.text)

        resp = await self.client.post(f"/api/mentorships/{mentorship_id}/sessions", json={"rating": 0.5, "notes": "Long division"})
        self.assertEqual(resp.status_code, HTTPStatus.CREATED, resp.text)
        self.assertEqual(resp.json()["sessions"][0]["rating"], 0.5)

        resp = await self.client.put(f"/api/mentorships/{mentorship_id}/archive")
        self.assertEqual(resp.status_code, HTTPStatus.OK, resp.text)
        self.assertEqual(resp.json()["state"], "ARCHIVED")
        self.assertIsNotNone(resp.json()["end_date"])

        resp = await self.client.put(f"/api/mentorships/{mentorship_id}/accept")
        self.assertEqual(resp.status_code, HTTPStatus.CONFLICT, resp.text)

    async def test_reject_over_http(self):
        mentorship_id = (await self.post_request()).json()["id"]
        self.gateway.send_message.reset_mock()

        resp = await self.client.put(f"/api/mentorships/{mentorship_id}/reject", params={"notify": "false"})

        self.assertEqual(resp.status_code, HTTPStatus.OK, resp.text)
        self.assertEqual(resp.json()["state"], "REJECTED")
        self.gateway.send_message.assert_not_awaited()

    async def test_empty_message(self):
        resp = await self.post_request(message="")

        self.assertEqual(resp.status_code, HTTPStatus.BAD_REQUEST)

    async def test_student_not_in_parents_roster(self):
        _, (stranger,) = await self.create_family(parent_name="Louis Reasoner", student_names=("Stranger",))

        resp = await self.post_request(student_id=stranger.id)

        self.assertEqual(resp.status_code, HTTPStatus.BAD_REQUEST)

    async def test_unknown_ids(self):
        resp = await self.post_request(mentor_id="missing-id")
        self.assertEqual(resp.status_code, HTTPStatus.NOT_FOUND)

        resp = await self.post_request(student_id="missing-id")
        self.assertEqual(resp.status_code, HTTPStatus.NOT_FOUND)

        for action in ("accept", "reject", "archive"):
            with self.subTest(action=action):
                resp = await self.client.put(f"/api/mentorships/missing-id/{action}")
                self.assertEqual(resp.status_code, HTTPStatus.NOT_FOUND)

    async def test_current_mentorships(self):
        mentorship_id = (await self.post_request()).json()["id"]

        resp = await self.client.get(f"/api/users/{self.student.id}/mentorships")

        self.assertEqual(resp.status_code, HTTPStatus.OK)
        self.assertEqual([m["id"] for m in resp.json()], [mentorship_id])
        self.assertEqual(resp.json()[0]["parent_name"], "Alyssa P Hacker")


if __name__ == "__main__":
    unittest.main()
