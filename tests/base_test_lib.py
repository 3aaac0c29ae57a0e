import unittest
import uuid
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from mentorlink.config import Settings
from mentorlink.database import create_db_and_tables
from mentorlink.models import CommunicationPreference, Mentor, Parent, Student
from mentorlink.services import MentorshipService, MentorshipStore, NotificationGateway, UserDirectory

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class BaseTestLib(unittest.IsolatedAsyncioTestCase):
    """
    A reusable base test class for store, directory and service tests.

    Features:
      - Each test gets its own in-memory SQLite database with all tables created.
      - StaticPool keeps every session on the same in-memory connection.
      - Provides factories for mentors, parents and students, and a service wired
        to a mocked notification gateway.
    """

    async def asyncSetUp(self):
        self.engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
        await create_db_and_tables(self.engine)
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
            class_=AsyncSession,
        )
        self.session = self.session_maker()

        self.gateway = AsyncMock(spec=NotificationGateway)
        self.store = MentorshipStore(self.session)
        self.directory = UserDirectory(self.session)
        self.service = self.make_service()

    async def asyncTearDown(self):
        await self.session.close()
        await self.engine.dispose()

    def make_service(self, session=None, **settings_overrides):
        session = session or self.session
        settings = Settings(**settings_overrides)
        return MentorshipService(
            store=MentorshipStore(session),
            directory=UserDirectory(session),
            gateway=self.gateway,
            settings=settings,
        )

    async def insert_entities(self, entities):
        self.session.add_all(entities)
        await self.session.commit()

    async def create_mentor(self, name="Ben Bitdiddle", **fields):
        mentor = Mentor(
            name=name,
            email=fields.pop("email", f"mentor+{uuid.uuid4().hex[:8]}@example.com"),
            college=fields.pop("college", "MIT"),
            major=fields.pop("major", "Testing"),
            communication_preference=fields.pop("communication_preference", CommunicationPreference.EMAIL),
            available=True,
            **fields,
        )
        await self.insert_entities([mentor])
        return mentor

    async def create_family(self, parent_name="Alyssa P Hacker", student_names=("Pork Bun",)):
        parent = Parent(
            name=parent_name,
            email=f"parent+{uuid.uuid4().hex[:8]}@example.com",
            phone="15005550006",
            communication_preference=CommunicationPreference.EMAIL,
        )
        parent.students = [Student(name=name, grade_level="5") for name in student_names]
        await self.insert_entities([parent])
        return parent, parent.students

    def sent_templates(self):
        return [call.args[1] for call in self.gateway.send_message.await_args_list]
