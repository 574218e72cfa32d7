"""Request-scoped FastAPI dependencies.

Every request gets its own transactional session. Services are built on
that session, so nothing is shared between requests except the pool.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from titan_orgs.presenters import Presenter
from titan_orgs.services.authorization import AuthorizationEngine
from titan_orgs.services.chain_of_command import ChainOfCommandResolver
from titan_orgs.services.hierarchy import OrganizationTree
from titan_orgs.services.membership import MembershipService
from titan_orgs.services.profiles import ProfileClient
from titan_orgs.services.reports import ReportLifecycle
from titan_orgs.services.roles import RoleLedger


def get_session(request: Request) -> Iterator[Session]:
    with request.app.state.database.session_scope() as session:
        yield session


def get_serializable_session(request: Request) -> Iterator[Session]:
    """Session for check-then-act paths (role assignment, reorder)."""
    with request.app.state.database.session_scope(serializable=True) as session:
        yield session


def get_profile_client(request: Request) -> ProfileClient:
    return request.app.state.profile_client


@dataclass
class Services:
    """The core components bound to one request session."""

    session: Session
    resolver: ChainOfCommandResolver
    authorization: AuthorizationEngine
    reports: ReportLifecycle
    membership: MembershipService

    def commit(self) -> None:
        """Commit the request transaction.

        Mutating routes call this before building their response; the
        closing session scope only commits what is left (normally nothing).
        """
        self.session.commit()

    @property
    def tree(self) -> OrganizationTree:
        return self.resolver.tree

    @property
    def ledger(self) -> RoleLedger:
        return self.resolver.ledger


def build_services(session: Session, max_depth: int) -> Services:
    resolver = ChainOfCommandResolver(session, max_depth=max_depth)
    return Services(
        session=session,
        resolver=resolver,
        authorization=AuthorizationEngine(resolver),
        reports=ReportLifecycle(session, resolver),
        membership=MembershipService(session, resolver.tree),
    )


def get_services(request: Request, session: Session = Depends(get_session)) -> Services:
    return build_services(session, request.app.state.settings.max_hierarchy_depth)


def get_serializable_services(
    request: Request, session: Session = Depends(get_serializable_session)
) -> Services:
    return build_services(session, request.app.state.settings.max_hierarchy_depth)


def presenter_for(services: Services, profiles: ProfileClient) -> Presenter:
    return Presenter(services.tree, services.ledger, profiles)
