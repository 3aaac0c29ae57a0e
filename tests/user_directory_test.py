import unittest
from datetime import datetime, timezone

from mentorlink.exceptions import NotFoundError, ValidationError
from tests.base_test_lib import BaseTestLib


class TestUserDirectory(BaseTestLib):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.mentor = await self.create_mentor()
        self.parent, self.students = await self.create_family(student_names=("Pork Bun", "Dim Sum"))

    async def test_find_records(self):
        mentor = await self.directory.find_mentor(self.mentor.id)
        parent = await self.directory.find_parent(self.parent.id)
        student = await self.directory.find_student(self.students[1].id)

        self.assertEqual(mentor.name, "Ben Bitdiddle")
        self.assertEqual(sorted(s.name for s in parent.students), ["Dim Sum", "Pork Bun"])
        self.assertEqual(student.parent_id, self.parent.id)

    async def test_find_missing_records(self):
        for lookup in (self.directory.find_mentor, self.directory.find_parent, self.directory.find_student):
            with self.subTest(lookup=lookup.__name__):
                with self.assertRaises(NotFoundError):
                    await lookup("missing-id")

    async def test_update_mentor(self):
        stamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

        mentor = await self.directory.update_mentor(self.mentor.id, {"last_request_time": stamp, "available": False})

        self.assertEqual(mentor.last_request_time, stamp)
        self.assertFalse(mentor.available)
        self.assertIsNotNone(mentor.updated_at)

    async def test_update_mentor_unknown_field(self):
        with self.assertRaises(ValidationError):
            await self.directory.update_mentor(self.mentor.id, {"favourite_colour": "green"})

    async def test_update_mentor_rejects_non_column_attributes(self):
        for key in ("metadata", "__table__", "id"):
            with self.subTest(key=key):
                with self.assertRaises(ValidationError):
                    await self.directory.update_mentor(self.mentor.id, {key: None})

    async def test_update_missing_mentor(self):
        with self.assertRaises(NotFoundError):
            await self.directory.update_mentor("missing-id", {"available": True})


if __name__ == "__main__":
    unittest.main()
