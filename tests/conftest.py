import pytest
from contextlib import asynccontextmanager
from fastapi.testclient import TestClient
from uuid import uuid4

from main import app
from core.database import get_db_connection, get_db_pool
from core.security import get_current_user_context


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    """Cada test arranca sin dependencias sobreescritas."""
    yield
    app.dependency_overrides.clear()


# ===== FIXTURES DE BASE DE DATOS =====

@pytest.fixture
def mock_db_conn():
    """Mock de conexión asyncpg: devuelve resultados encolados en orden de llamada."""
    class MockDbConnection:
        def __init__(self):
            self._execute_calls = []
            self._fetch_results = []
            self._fetchrow_results = []
            self._fetchval_results = []

        async def fetch(self, query, *params):
            self._execute_calls.append(('fetch', query, params))
            return self._fetch_results.pop(0) if self._fetch_results else []

        async def fetchrow(self, query, *params):
            self._execute_calls.append(('fetchrow', query, params))
            return self._fetchrow_results.pop(0) if self._fetchrow_results else None

        async def fetchval(self, query, *params):
            self._execute_calls.append(('fetchval', query, params))
            return self._fetchval_results.pop(0) if self._fetchval_results else None

        # Helpers para configurar mocks
        def set_fetch_result(self, result):
            self._fetch_results.append(result)

        def set_fetchrow_result(self, result):
            self._fetchrow_results.append(result)

        def set_fetchval_result(self, result):
            self._fetchval_results.append(result)

        # Helpers para verificar llamadas
        def called_with_pattern(self, pattern):
            """Verifica si alguna query contiene el patrón."""
            return any(pattern.lower() in call[1].lower() for call in self._execute_calls)

        def calls(self, kind):
            return [c for c in self._execute_calls if c[0] == kind]

    return MockDbConnection()


@pytest.fixture
def mock_pool(mock_db_conn):
    """Pool falso: cada acquire() presta la misma conexión mock."""
    class MockPool:
        def __init__(self, conn):
            self.conn = conn
            self.acquire_count = 0

        @asynccontextmanager
        async def acquire(self):
            self.acquire_count += 1
            yield self.conn

    return MockPool(mock_db_conn)


def _override_db(mock_db_conn, mock_pool):
    async def _conn():
        yield mock_db_conn

    app.dependency_overrides[get_db_connection] = _conn
    app.dependency_overrides[get_db_pool] = lambda: mock_pool


def _override_context(context):
    async def _ctx():
        return context

    app.dependency_overrides[get_current_user_context] = _ctx


@pytest.fixture
def client_anon(client, mock_db_conn, mock_pool):
    """Cliente sin sesión (BD mockeada)."""
    _override_db(mock_db_conn, mock_pool)
    return client


@pytest.fixture
def client_admin(client, mock_db_conn, mock_pool):
    """Cliente autenticado como ADMIN."""
    _override_db(mock_db_conn, mock_pool)
    _override_context({
        "user_db_id": "admin-uuid",
        "user_name": "Admin Test",
        "email": "admin@empresa.com",
        "role": "ADMIN",
        "module_roles": {},
        "employee_id": None
    })
    return client


@pytest.fixture
def client_user(client, mock_db_conn, mock_pool):
    """Cliente autenticado como USER sin acceso al módulo objetivos."""
    _override_db(mock_db_conn, mock_pool)
    _override_context({
        "user_db_id": "user-uuid",
        "user_name": "User Test",
        "email": "user@empresa.com",
        "role": "USER",
        "module_roles": {"vacaciones": "viewer"},
        "employee_id": None
    })
    return client


@pytest.fixture
def leader_id():
    return uuid4()


@pytest.fixture
def client_leader(client, mock_db_conn, mock_pool, leader_id):
    """Cliente autenticado como líder vinculado a un empleado."""
    _override_db(mock_db_conn, mock_pool)
    _override_context({
        "user_db_id": "leader-uuid",
        "user_name": "Leader Test",
        "email": "leader@empresa.com",
        "role": "USER",
        "module_roles": {},
        "employee_id": leader_id
    })
    return client
