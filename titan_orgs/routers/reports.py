"""Report endpoints: filing, listing, the pending inbox and acknowledgment."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from titan_orgs.auth import AuthenticatedUser, get_authenticated_user
from titan_orgs.dependencies import Services, get_profile_client, get_services, presenter_for
from titan_orgs.schemas.reports import CreateReportRequest, ReportResponse
from titan_orgs.services.profiles import ProfileClient

router = APIRouter(prefix="/api/organizations", tags=["reports"])


@router.get("/reports/unacknowledged", response_model=list[ReportResponse])
def get_all_unacknowledged_reports(
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> list[ReportResponse]:
    """Reports awaiting the caller's acknowledgment."""
    reports = services.reports.find_pending_for_user(auth_user.user_id)
    return presenter_for(services, profiles).reports(reports)


@router.get("/{org_id}/reports", response_model=list[ReportResponse])
def list_organization_reports(
    org_id: int,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> list[ReportResponse]:
    """Reports visible to the caller given their seat in the chain."""
    reports = services.reports.list_for_user(org_id, auth_user.user_id)
    return presenter_for(services, profiles).reports(reports)


@router.post("/{org_id}/reports", response_model=ReportResponse)
def create_organization_report(
    org_id: int,
    request: CreateReportRequest,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> ReportResponse:
    report = services.reports.submit_report(
        org_id,
        auth_user.user_id,
        comments=request.comments,
        term_start_date=request.term_start_date,
    )
    services.commit()
    return presenter_for(services, profiles).report(report)


@router.post("/{org_id}/reports/{report_id}/ack", response_model=ReportResponse)
def ack_organization_report(
    org_id: int,
    report_id: int,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> ReportResponse:
    """Acknowledge a report. Only the submitter's direct superior may do so."""
    report = services.reports.acknowledge(report_id, auth_user.user_id)
    services.commit()
    return presenter_for(services, profiles).report(report)
