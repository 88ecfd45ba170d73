import os

os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite://')

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import make_url

from core.security import UserRole, create_access_token
from database.database import DataBaseConnection
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import Employee
from main import app
from presentation.employee import get_session
from services.employee_service import EmployeeService


@pytest.fixture
async def db():
    connection = DataBaseConnection(make_url('sqlite+aiosqlite://'))
    await connection.create_tables()
    yield connection
    await connection.dispose()


@pytest.fixture
async def session(db):
    async with db.get_session() as s:
        yield s


@pytest.fixture
def repo(session) -> EmployeeRepo:
    return EmployeeRepo(session)


@pytest.fixture
def service(session) -> EmployeeService:
    return EmployeeService(session)


@pytest.fixture
async def client(db):
    async def override_get_session():
        async with db.get_session() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(role: UserRole = UserRole.ADMIN) -> dict[str, str]:
    token = create_access_token(1, f'{role.value}-tester', role)
    return {'Authorization': f'Bearer {token}'}


async def seed(repo: EmployeeRepo, name: str, manager: Employee | None = None) -> Employee:
    return await repo.save(
        Employee(name=name, position='Engineer', manager_id=manager.id if manager else None)
    )


async def seed_chain(repo: EmployeeRepo) -> tuple[Employee, Employee, Employee]:
    """A <- B <- C"""
    a = await seed(repo, 'A')
    b = await seed(repo, 'B', a)
    c = await seed(repo, 'C', b)
    return a, b, c
