import itertools
import os
import re
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Make the app package importable and configure it before app.config loads
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT", "100000/minute")

from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.database.supabase_client import SupabaseClient, get_auth_client
from app.modules.auth.service import clear_auth_cache
from app.main import app


class FakeResult:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class _Negated:
    def __init__(self, query):
        self.query = query

    def is_(self, column, value):
        return self.query._filter(lambda row: not _is_match(row, column, value))

    def eq(self, column, value):
        return self.query._filter(lambda row: str(row.get(column)) != str(value))


def _is_match(row, column, value):
    if value == "null":
        return row.get(column) is None
    return str(row.get(column)).lower() == str(value).lower()


# column.operator.value, value either bare or double-quoted with backslash escapes
_OR_CLAUSE = re.compile(r'(\w+)\.(\w+)\.("(?:[^"\\]|\\.)*"|[^,]*)')


def _ilike(row, column, pattern):
    needle = pattern.strip("%").lower()
    return needle in str(row.get(column) or "").lower()


def _sort_key(column, desc, nullsfirst):
    def key(row):
        value = row.get(column)
        missing = value is None
        # nulls last unless nullsfirst, whatever the direction
        flag = (0 if missing else 1) if (nullsfirst ^ desc) else (1 if missing else 0)
        return (flag, "" if missing else value)
    return key


class FakeQuery:
    """Chainable stand-in for the PostgREST request builder, evaluated over in-memory rows"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.orders = []
        self.count_mode = None
        self.head = False
        self.single_mode = None
        self._limit = None
        self._range = None

    def _filter(self, predicate):
        self.filters.append(predicate)
        return self

    @property
    def not_(self):
        return _Negated(self)

    def select(self, *columns, count=None, head=None):
        self.columns = ",".join(columns) if columns else "*"
        self.count_mode = count
        self.head = bool(head)
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        return self._filter(lambda row: str(row.get(column)) == str(value))

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        return self._filter(lambda row: str(row.get(column)) in wanted)

    def is_(self, column, value):
        return self._filter(lambda row: _is_match(row, column, value))

    def ilike(self, column, pattern):
        return self._filter(lambda row: _ilike(row, column, pattern))

    def or_(self, expression):
        clauses = []
        for column, operator, value in _OR_CLAUSE.findall(expression):
            assert operator == "ilike"
            if value.startswith('"'):
                value = re.sub(r"\\(.)", r"\1", value[1:-1])
            clauses.append((column, value))
        return self._filter(lambda row: any(_ilike(row, c, p) for c, p in clauses))

    def order(self, column, desc=False, nullsfirst=False):
        self.orders.append((column, desc, bool(nullsfirst)))
        return self

    def limit(self, size):
        self._limit = size
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def _matches(self, row):
        return all(predicate(row) for predicate in self.filters)

    def _project(self, row):
        columns = [c.strip() for c in self.columns.split(",")]
        if "*" in columns or any("(" in c or ":" in c for c in columns):
            return dict(row)
        return {c: row.get(c) for c in columns}

    def execute(self):
        self.db.ops.append((self.op, self.table))
        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.new_row(self.table, item) for item in payload]
            rows.extend(inserted)
            return FakeResult([dict(r) for r in inserted])

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(r) for r in matched])

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResult([dict(r) for r in matched])

        for column, desc, nullsfirst in reversed(self.orders):
            matched = sorted(matched, key=_sort_key(column, desc, nullsfirst), reverse=desc)
        count = len(matched) if self.count_mode else None
        if self._range is not None:
            start, end = self._range
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[:self._limit]
        data = [self._project(row) for row in matched]

        if self.head:
            return FakeResult([], count)
        if self.single_mode == "maybe":
            return FakeResult(data[0], count) if data else None
        if self.single_mode == "single":
            if len(data) != 1:
                raise APIError({"message": "JSON object requested, multiple (or no) rows returned", "code": "PGRST116"})
            return FakeResult(data[0], count)
        return FakeResult(data, count)


class FakeUser:
    def __init__(self, id, email, user_metadata=None):
        self.id = id
        self.email = email
        self.user_metadata = user_metadata or {}
        self.app_metadata = {}
        self.created_at = "2024-01-01T00:00:00+00:00"
        self.updated_at = None

    def model_dump(self, mode=None):
        return {"id": self.id, "email": self.email, "user_metadata": self.user_metadata}


class FakeAdmin:
    def __init__(self, db):
        self.db = db
        self.calls = []

    def list_users(self):
        self.calls.append(("list_users",))
        return list(self.db.users.values())

    def create_user(self, attributes):
        self.calls.append(("create_user", attributes))
        user = self.db.new_user(attributes["email"], attributes.get("user_metadata"))
        return SimpleNamespace(user=user)

    def delete_user(self, user_id):
        self.calls.append(("delete_user", user_id))
        self.db.users.pop(user_id, None)

    def update_user_by_id(self, user_id, attributes):
        self.calls.append(("update_user_by_id", user_id, attributes))
        if user_id not in self.db.users:
            raise Exception("User not found")
        return SimpleNamespace(user=self.db.users[user_id])

    def invite_user_by_email(self, email, options=None):
        self.calls.append(("invite_user_by_email", email, options))

    def generate_link(self, params):
        self.calls.append(("generate_link", params))

    def sign_out(self, jwt):
        self.calls.append(("sign_out", jwt))


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.admin = FakeAdmin(db)
        self.calls = []

    def _session(self, user):
        token = self.db.issue_token(user)
        return SimpleNamespace(access_token=token, refresh_token=f"refresh-{token}")

    def get_user(self, jwt=None):
        user = self.db.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials["email"]))
        user = next((u for u in self.db.users.values() if u.email == credentials["email"]), None)
        if user is None or self.db.passwords.get(user.id) != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(user=user, session=self._session(user))

    def set_session(self, access_token, refresh_token):
        self.calls.append(("set_session", access_token, refresh_token))
        if access_token not in self.db.tokens:
            raise Exception("Invalid session")
        return SimpleNamespace(session=SimpleNamespace(access_token=access_token, refresh_token=refresh_token))

    def sign_in_with_otp(self, credentials):
        self.calls.append(("sign_in_with_otp", credentials))

    def verify_otp(self, params):
        self.calls.append(("verify_otp", params))
        if params["token"] != self.db.otp_code:
            raise Exception("Token has expired or is invalid")
        user = next((u for u in self.db.users.values() if u.email == params["email"]), None)
        user = user or self.db.new_user(params["email"])
        return SimpleNamespace(user=user, session=self._session(user))

    def reset_password_for_email(self, email, options=None):
        self.calls.append(("reset_password_for_email", email, options))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, options=None):
        self.storage.db.ops.append(("storage.upload", path))
        self.storage.objects[path] = content

    def remove(self, paths):
        self.storage.db.ops.append(("storage.remove", tuple(paths)))
        for path in paths:
            self.storage.objects.pop(path, None)


class FakeStorage:
    def __init__(self, db):
        self.db = db
        self.objects = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory Supabase client: tables, auth (with admin) and storage"""

    def __init__(self):
        self.tables = {}
        self.ops = []
        self.failures = {}
        self.users = {}
        self.passwords = {}
        self.tokens = {}
        self.otp_code = "123456"
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def new_row(self, table, values):
        row = dict(values)
        row.setdefault("id", f"{table}-{next(self._ids)}")
        tick = next(self._clock)
        row.setdefault("created_at", f"2024-01-01T00:{tick // 60:02d}:{tick % 60:02d}+00:00")
        return row

    def seed(self, table, *rows):
        created = [self.new_row(table, row) for row in rows]
        self.tables.setdefault(table, []).extend(created)
        return created

    def new_user(self, email, metadata=None):
        user = FakeUser(f"user-{next(self._ids)}", email, metadata)
        self.users[user.id] = user
        return user

    def issue_token(self, user):
        token = f"jwt-{user.id}-{next(self._ids)}"
        self.tokens[token] = user
        return token

    def add_account(self, email, role=None, password=None):
        """Auth user + profile (when role given) + access token"""
        user = self.new_user(email)
        if password:
            self.passwords[user.id] = password
        profile = None
        if role is not None:
            profile = self.seed("profile", {"user_id": user.id, "nome": email.split("@")[0], "role": role})[0]
        return SimpleNamespace(user=user, profile=profile, token=self.issue_token(user))

    def ops_on(self, table):
        return [op for op, name in self.ops if name == table]


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    SupabaseClient._client = fake
    SupabaseClient._service_client = fake
    app.dependency_overrides[get_auth_client] = lambda: fake
    clear_auth_cache()
    yield fake
    app.dependency_overrides.clear()
    SupabaseClient.reset_client()
    clear_auth_cache()


@pytest.fixture
def client(fake_supabase):
    return TestClient(app)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin(fake_supabase):
    return fake_supabase.add_account("admin@ilpdg.it", role="super_admin", password="Secret1!")


@pytest.fixture
def brand(fake_supabase):
    return fake_supabase.add_account("brand@ilpdg.it", role="brand", password="Secret1!")


@pytest.fixture
def cep(fake_supabase):
    return fake_supabase.add_account("cep@ilpdg.it", role="cep")
