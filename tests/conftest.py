"""
Issue tracker - test configuration and fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Callable, Awaitable
import pytest
from httpx import AsyncClient, ASGITransport
from faker import Faker
from sqlmodel import SQLModel

# Point the store at a throwaway file before the app is imported
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "issuetracker-test.db")
os.environ['ISSUES_DB_URL'] = f'sqlite:///{TEST_DB_PATH}'
os.environ['SESSION_SECRET'] = 'test-session-secret'

from issuetracker.main import app
from issuetracker.db import engine, init_db, get_session
from issuetracker.accounts.models import User
from issuetracker.projects import store

fake = Faker()

ADMIN_PASSWORD = '123123'
MEMBER_PASSWORD = 'member-pass'


@pytest.fixture
def db():
    """Fresh tables with the seeded Admin for each test"""
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def member(db) -> User:
    """A regular, non-admin user"""
    with get_session() as s:
        user = User(
            email=fake.email(),
            username=fake.user_name(),
            password=MEMBER_PASSWORD,
            role='user',
        )
        s.add(user)
        s.commit()
        s.refresh(user)
        return user


@pytest.fixture
def admin(db) -> User:
    with get_session() as s:
        return store.find_user_by_username(s, 'Admin')


@pytest.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


async def login(ac: AsyncClient, username: str, password: str):
    return await ac.post('/account/login', data={'username': username, 'password': password})


@pytest.fixture
async def client_factory(db) -> AsyncGenerator[Callable[[str, str], Awaitable[AsyncClient]], None]:
    """Build logged-in clients, each with its own cookie jar"""
    clients = []

    async def make(username: str, password: str) -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url='http://test')
        clients.append(ac)
        response = await login(ac, username, password)
        assert response.headers['location'] == '/'
        return ac

    yield make

    for ac in clients:
        await ac.aclose()


@pytest.fixture
async def admin_client(client_factory) -> AsyncClient:
    return await client_factory('Admin', ADMIN_PASSWORD)


@pytest.fixture
async def member_client(client_factory, member) -> AsyncClient:
    return await client_factory(member.username, MEMBER_PASSWORD)


@pytest.fixture
def load_project(db):
    """Read a project document straight from the store"""
    def load(name: str):
        with get_session() as s:
            return store.find_project(s, name)
    return load
