"""Shared test fixtures for the Titan Organizations test suite."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from titan_orgs.app import create_app
from titan_orgs.config import Settings
from titan_orgs.models import Organization
from titan_orgs.services.hierarchy import OrganizationTree
from titan_orgs.services.roles import RoleLedger
from titan_orgs.store import Database


def _test_settings(tmp_path) -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        allowed_origins="http://localhost:3000,http://localhost:5015",
        database_url=f"sqlite:///{tmp_path / 'titan.db'}",
        secret_key="test-secret",
        profile_api_url="",
    )


@pytest.fixture
def settings(tmp_path):
    """Test settings backed by a throwaway SQLite file."""
    return _test_settings(tmp_path)


@pytest.fixture
def database(settings):
    """A fresh schema per test."""
    db = Database(settings)
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def app(settings, database):
    """Create a fresh FastAPI app for testing."""
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture
def session(database):
    """A session for service-level tests; never committed."""
    s = database.SessionLocal()
    yield s
    s.rollback()
    s.close()


@pytest.fixture
def auth_headers(settings):
    """Build bearer headers for a user id, as the identity service would."""

    def _headers(user_id: int) -> dict[str, str]:
        token = jwt.encode({"sub": str(user_id)}, settings.secret_key, algorithm=settings.jwt_algorithm)
        return {"Authorization": f"Bearer {token}"}

    return _headers


def _org(session, slug: str, name: str, parent: Organization | None = None) -> Organization:
    org = Organization(slug=slug, name=name, parent_id=parent.id if parent else None)
    session.add(org)
    session.flush()
    return org


@pytest.fixture
def hierarchy(database):
    """Seed a committed organization forest with ranked and unranked roles.

    unkso (root)          R1 rank 1 user 1, R2 rank 2 user 2, clerk unranked user 9
      bn                  B1 rank 1 user 3, B2 rank 2 user 4, B3 rank 3 user 5
        co                C1 rank 1 user 6, C2 rank 2 user 7
        staff             (no roles)
          det             D1 rank 1 user 10
    other (root)          O1 rank 1 user 8
    """
    with database.session_scope() as s:
        tree = OrganizationTree(s)
        ledger = RoleLedger(s, tree)

        root = _org(s, "unkso", "UNKSO")
        bn = _org(s, "bn", "1st Battalion", root)
        co = _org(s, "co", "Alpha Company", bn)
        other = _org(s, "other", "Other Clan")
        staff = _org(s, "staff", "Battalion Staff", bn)
        det = _org(s, "det", "Detachment", staff)

        r1 = ledger.create_role(root.id, "Commander", rank=1, user_id=1)
        r2 = ledger.create_role(root.id, "Executive Officer", rank=2, user_id=2)
        clerk = ledger.create_role(root.id, "Clerk", rank=None, user_id=9)
        b1 = ledger.create_role(bn.id, "Battalion Commander", rank=1, user_id=3)
        b2 = ledger.create_role(bn.id, "Battalion XO", rank=2, user_id=4)
        b3 = ledger.create_role(bn.id, "Battalion NCO", rank=3, user_id=5)
        c1 = ledger.create_role(co.id, "Company Commander", rank=1, user_id=6)
        c2 = ledger.create_role(co.id, "Platoon Leader", rank=2, user_id=7)
        o1 = ledger.create_role(other.id, "Leader", rank=1, user_id=8)
        d1 = ledger.create_role(det.id, "Detachment Lead", rank=1, user_id=10)

        ids = SimpleNamespace(
            root=root.id, bn=bn.id, co=co.id, other=other.id, staff=staff.id, det=det.id,
            r1=r1.id, r2=r2.id, clerk=clerk.id,
            b1=b1.id, b2=b2.id, b3=b3.id,
            c1=c1.id, c2=c2.id, o1=o1.id, d1=d1.id,
        )
    return ids
