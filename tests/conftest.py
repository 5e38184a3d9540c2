import os
import tempfile
import uuid

_TMP = tempfile.mkdtemp(prefix="academy-tests-")
os.environ["DATABASE_ASYNC_URL"] = f"sqlite+aiosqlite:///{_TMP}/default.db"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["SECRET_KEY"] = "test-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from academy.core.enum import Role  # noqa: E402
from academy.core.security import SecurityService  # noqa: E402
from academy.db.models.database import Base, Chapter, Course, User  # noqa: E402
from academy.db.session import build_engine, get_session  # noqa: E402
from academy.main import app  # noqa: E402

PASSWORD = "secret123"
_HASHES: dict[str, str] = {}


async def _hash(password: str) -> str:
    if password not in _HASHES:
        _HASHES[password] = await SecurityService.hash_password(password)
    return _HASHES[password]


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Create a user and return ``(user, auth_headers)``."""

    async def _make(role: Role = Role.USER, password: str = PASSWORD, **fields):
        fields.setdefault("email", f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@mail.com")
        fields.setdefault("full_name", f"{role.value.title()} Account")
        async with session_factory() as session:
            user = User(role=role, password=await _hash(password), **fields)
            session.add(user)
            await session.commit()
            await session.refresh(user)
        token = await SecurityService().create_access_token(str(user.id), role.value)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_course(session_factory):
    async def _make(owner: User, **fields):
        fields.setdefault("title", "Algebra Basics")
        fields.setdefault("description", "Linear equations and inequalities")
        fields.setdefault("image_url", "https://cdn.mail.com/algebra.png")
        fields.setdefault("is_published", True)
        async with session_factory() as session:
            course = Course(user_id=owner.id, **fields)
            session.add(course)
            await session.commit()
            await session.refresh(course)
        return course

    return _make


@pytest.fixture
def make_chapter(session_factory):
    async def _make(course: Course, position: int, **fields):
        fields.setdefault("title", f"Chapter {position}")
        fields.setdefault("is_published", True)
        fields.setdefault("video_url", f"https://video.mail.com/{position}.mp4")
        async with session_factory() as session:
            chapter = Chapter(course_id=course.id, position=position, **fields)
            session.add(chapter)
            await session.commit()
            await session.refresh(chapter)
        return chapter

    return _make
