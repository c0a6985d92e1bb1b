# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Dict, Generator, List, Optional, Tuple

from app.core.dependencies import get_current_user_id, get_permission_store, get_user_directory
from app.core.errors import LookupFailure, PersistFailure
from app.main import app as fastapi_app
from app.modules.auth.service import clear_auth_cache
from app.modules.permissions.resolver import PermissionResolver
from app.modules.permissions.schemas import PermissionRecord
from app.modules.permissions.service import PermissionService
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserDirectory


class InMemoryPermissionStore:
    """Permission store double keyed by (user_id, page), with switchable failures."""

    def __init__(self):
        self.rows: Dict[Tuple, PermissionRecord] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.read_calls = 0
        self.upsert_calls: List[List[PermissionRecord]] = []

    def add(self, user_id, page, **flags) -> PermissionRecord:
        record = PermissionRecord(user_id=user_id, page=page, **flags)
        self.rows[(user_id, page)] = record
        return record

    def get(self, user_id, page) -> Optional[PermissionRecord]:
        self.read_calls += 1
        if self.fail_reads:
            raise LookupFailure("get", "connection refused")
        record = self.rows.get((user_id, page))
        if record is None or not record.is_active:
            return None
        return record

    def list_for_user(self, user_id) -> List[PermissionRecord]:
        self.read_calls += 1
        if self.fail_reads:
            raise LookupFailure("list_for_user", "connection refused")
        return [r for (uid, _), r in self.rows.items() if uid == user_id and r.is_active]

    def list_active(self) -> List[PermissionRecord]:
        self.read_calls += 1
        if self.fail_reads:
            raise LookupFailure("list_active", "connection refused")
        return [r for r in self.rows.values() if r.is_active]

    def upsert(self, records) -> List[PermissionRecord]:
        records = list(records)
        if self.fail_writes:
            raise PersistFailure("upsert", "permission denied for table permissoes_usuario")
        self.upsert_calls.append(records)
        for record in records:
            self.rows[(record.user_id, record.page)] = record.model_copy()
        return records

    def deactivate(self, user_id, page) -> bool:
        if self.fail_writes:
            raise PersistFailure("deactivate", "permission denied for table permissoes_usuario")
        record = self.rows.get((user_id, page))
        if record is None:
            return False
        self.rows[(user_id, page)] = record.model_copy(update={"is_active": False})
        return True


class FakeUserDirectory(UserDirectory):
    def __init__(self, users: List[UserResponse]):
        self.users = {str(user.id): user for user in users}

    def find_user(self, user_id):
        return self.users.get(str(user_id))

    def list_users(self, include_super_users: bool = False):
        users = [u for u in self.users.values() if u.is_active]
        if not include_super_users:
            users = [u for u in users if not u.is_super_user]
        return sorted(users, key=lambda u: u.name)


ADMIN = UserResponse(id="u-admin", username="ADMIN", name="Administrador", is_super_user=True)
CLERK = UserResponse(id="u-clerk", username="CLERK", name="Balconista")
BUYER = UserResponse(id="u-buyer", username="BUYER", name="Comprador")


@pytest.fixture
def store() -> InMemoryPermissionStore:
    return InMemoryPermissionStore()


@pytest.fixture
def resolver(store) -> PermissionResolver:
    return PermissionResolver(store)


@pytest.fixture
def service(store, resolver) -> PermissionService:
    return PermissionService(store, resolver)


@pytest.fixture
def directory() -> FakeUserDirectory:
    return FakeUserDirectory([ADMIN, CLERK, BUYER])


@pytest.fixture
def acting_user() -> Dict:
    """Mutable auth payload returned for the bearer token; tests switch users by updating it."""
    return {"id": CLERK.id, "email": "clerk@example.com", "app_metadata": {}}


@pytest.fixture
def client(store, directory, acting_user) -> Generator[TestClient, None, None]:
    """Test client with auth, directory and store replaced by in-memory doubles."""
    fastapi_app.dependency_overrides[get_current_user_id] = lambda: acting_user
    fastapi_app.dependency_overrides[get_user_directory] = lambda: directory
    fastapi_app.dependency_overrides[get_permission_store] = lambda: store
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()
