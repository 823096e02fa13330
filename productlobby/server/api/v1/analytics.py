"""
Analytics Endpoints.

Creator-only traffic analytics built from recorded contribution events, plus
the public campaign activity feed.
"""

from typing import Optional

from fastapi import APIRouter, Query, Response

from productlobby.core.errors import InvalidRequestError
from productlobby.core.models.io import Feed
from productlobby.scoring.analytics import AnalyticsReport, report_to_csv
from productlobby.server.services.deps import CampaignDep, CurrentUser, ReposDep, ensure_campaign_creator
from productlobby.server.services.feeds import DEFAULT_FEED_LIMIT, campaign_feed
from productlobby.server.services.metrics import campaign_analytics

router = APIRouter()

EXPORT_FORMATS = ("json", "csv")


@router.get(
    "/{campaign_id}/analytics-export",
    response_model=AnalyticsReport,
    summary="Export Analytics",
    description="Views, visitors, conversion, referrals and devices for 7d, 30d, 90d or all time, as JSON or CSV.",
    responses={
        200: {"content": {"text/csv": {}}},
        400: {"description": "Unsupported format"},
        403: {"description": "Caller is not the creator"},
    },
)
async def export_analytics(
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    export_format: str = Query(default="json", alias="format"),
    period: Optional[str] = Query(default=None, description="7d, 30d, 90d or all; anything else means 30d"),
):
    ensure_campaign_creator(campaign, user, "view analytics")
    fmt = export_format.lower()
    if fmt not in EXPORT_FORMATS:
        raise InvalidRequestError(f"Unsupported export format: {export_format}")

    report = await campaign_analytics(repos, campaign, period)
    if fmt == "csv":
        return Response(
            content=report_to_csv(report),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="campaign-{campaign.id}-analytics.csv"'},
        )
    return report


@router.get(
    "/{campaign_id}/feed",
    response_model=Feed,
    summary="Campaign Feed",
    description="Lobbies, public pledges, comments, polls and surveys on a campaign, newest first.",
)
async def read_campaign_feed(
    campaign: CampaignDep,
    repos: ReposDep,
    limit: int = Query(default=DEFAULT_FEED_LIMIT, ge=1, le=200),
) -> Feed:
    return await campaign_feed(repos, campaign, limit=limit)
