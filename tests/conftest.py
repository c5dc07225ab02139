# ruff: noqa: E402
# File: /tests/conftest.py
import pathlib
import sys

# Make repo root importable as "practice"
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from practice.db.base_class import Base
from practice.main import app
from practice.models import Client, Project, ProjectType, Service, Stage, User
from practice.projects_page.transport import ApiError

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def _create_schema():
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    connection = engine.connect()
    trans = connection.begin()
    try:
        session = TestingSessionLocal(bind=connection)
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    from practice.db.session import get_db  # late import to avoid circulars

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def login(client, db_session) -> Callable[..., Dict[str, str]]:
    """Register (idempotent) + token login; returns auth headers."""

    def _login(email: str, *, manager: bool = False, admin: bool = False, **names: str) -> Dict[str, str]:
        client.post("/auth/register", json={"email": email, "password": "pw", **names})
        if manager or admin:
            user = db_session.query(User).filter_by(email=email).one()
            user.can_see_admin_menu = manager
            user.is_admin = admin
            db_session.commit()
        r = client.post("/auth/token", data={"username": email, "password": "pw"})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _login


@pytest.fixture()
def seed(db_session) -> SimpleNamespace:
    """
    Two services, two project types with stages, two clients and four projects:

    - late:      Acme / Payroll Run / Intake, assigned to Alice, owned by Bob,
                 due yesterday, 3 days in a 24h stage
    - upcoming:  Globex / Year End / Draft, unassigned, due in 5 days
    - archived:  Acme / Payroll Run / Processing, archived
    - done:      Globex / Year End / Draft, completed, no due date
    """
    now = datetime.now(UTC)
    alice = User(email="alice@example.com", hashed_password="x", first_name="Alice", last_name="Ng")
    bob = User(email="bob@example.com", hashed_password="x", first_name="Bob", last_name="Roy")
    payroll = Service(name="Payroll")
    accounts = Service(name="Accounts")
    retired = Service(name="Retired", is_active=False)
    db_session.add_all([alice, bob, payroll, accounts, retired])
    db_session.flush()

    run = ProjectType(name="Payroll Run", service_id=payroll.id)
    year_end = ProjectType(name="Year End", service_id=accounts.id)
    db_session.add_all([run, year_end])
    db_session.flush()
    db_session.add_all(
        [
            Stage(project_type_id=run.id, name="Intake", sort_order=1, max_instance_time=24),
            Stage(project_type_id=run.id, name="Processing", sort_order=2, max_instance_time=48),
            Stage(project_type_id=year_end.id, name="Draft", sort_order=0),
        ]
    )

    acme = Client(name="Acme")
    globex = Client(name="Globex")
    db_session.add_all([acme, globex])
    db_session.flush()

    late = Project(
        client_id=acme.id,
        project_type_id=run.id,
        current_status="Intake",
        stage_entered_at=now - timedelta(days=3),
        current_assignee_id=alice.id,
        project_owner_id=bob.id,
        due_date=now - timedelta(days=1),
    )
    upcoming = Project(
        client_id=globex.id,
        project_type_id=year_end.id,
        current_status="Draft",
        due_date=now + timedelta(days=5),
    )
    archived = Project(
        client_id=acme.id,
        project_type_id=run.id,
        current_status="Processing",
        archived=True,
        due_date=now + timedelta(days=2),
    )
    done = Project(client_id=globex.id, project_type_id=year_end.id, current_status="Draft", is_completed=True)
    db_session.add_all([late, upcoming, archived, done])
    db_session.commit()

    return SimpleNamespace(
        now=now,
        alice=alice,
        bob=bob,
        payroll=payroll,
        accounts=accounts,
        run=run,
        year_end=year_end,
        acme=acme,
        globex=globex,
        late=late,
        upcoming=upcoming,
        archived=archived,
        done=done,
    )


# -------------------- Projects page engine fakes --------------------


class FakeApi:
    """
    In-memory stand-in for `ApiClient`.

    `reads[resource]` is a value, an exception instance (raised) or a callable
    taking the params. `writes[(METHOD, resource)]` works the same way with the
    payload; resources of writes are matched exactly, then by prefix.
    """

    def __init__(self) -> None:
        self.reads: Dict[str, Any] = {}
        self.writes: Dict[Tuple[str, str], Any] = {}
        self.fetches: List[Tuple[str, Dict[str, Any]]] = []
        self.mutations: List[Tuple[str, str, Any]] = []

    def fetch_count(self, resource: str) -> int:
        return sum(1 for r, _ in self.fetches if r == resource)

    def mutations_to(self, method: str, prefix: str) -> List[Tuple[str, str, Any]]:
        return [m for m in self.mutations if m[0] == method and m[1].startswith(prefix)]

    @staticmethod
    def _resolve(handler: Any, arg: Any) -> Any:
        if isinstance(handler, BaseException):
            raise handler
        return handler(arg) if callable(handler) else handler

    async def fetch(self, resource: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = dict(params or {})
        self.fetches.append((resource, params))
        if resource not in self.reads:
            raise ApiError(404, f"no fake for {resource}")
        return self._resolve(self.reads[resource], params)

    async def mutate(self, method: str, resource: str, payload: Any = None) -> Any:
        method = method.upper()
        self.mutations.append((method, resource, payload))
        handler = self.writes.get((method, resource))
        if handler is None:
            for (m, prefix), h in self.writes.items():
                if m == method and resource.startswith(prefix):
                    handler = h
                    break
        if handler is None:
            return None
        return self._resolve(handler, payload)

    async def aclose(self) -> None:
        return None


@pytest.fixture()
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def make_project() -> Callable[..., Any]:
    """Factory for `ProjectOut` values with sensible defaults."""
    from practice.schemas.core_entities import ClientRef, ProjectOut, ProjectTypeRef, UserRef

    counter = {"n": 0}

    def _make(
        *,
        service_id: Optional[str] = "svc-1",
        project_type_id: str = "pt-1",
        assignee: Optional[str] = None,
        owner: Optional[str] = None,
        due: Optional[datetime] = None,
        archived: bool = False,
        status: str = "Intake",
        stage_entered_at: Optional[datetime] = None,
        client_type_ids: Tuple[str, ...] = (),
        **extra: Any,
    ) -> ProjectOut:
        counter["n"] += 1
        n = counter["n"]
        return ProjectOut(
            id=extra.pop("id", f"p-{n}"),
            client_id=f"c-{n}",
            project_type_id=project_type_id,
            current_status=status,
            stage_entered_at=stage_entered_at,
            current_assignee_id=assignee,
            project_owner_id=owner,
            due_date=due,
            archived=archived,
            client=ClientRef(id=f"c-{n}", name=f"Client {n}", project_type_ids=list(client_type_ids)),
            project_type=ProjectTypeRef(id=project_type_id, name=f"Type {project_type_id}", service_id=service_id),
            current_assignee=UserRef(id=assignee, email=f"{assignee}@example.com") if assignee else None,
            project_owner=UserRef(id=owner, email=f"{owner}@example.com") if owner else None,
            **extra,
        )

    return _make
