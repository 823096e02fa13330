"""
Contribution Event Endpoints.

Clients report campaign activity here (shares, page views, reactions...).
Page views may be anonymous; the creator can list everything recorded.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from productlobby.core.database.entities import ContributionEventType
from productlobby.core.models.io import ContributionEventCreate, ContributionEventRead
from productlobby.server.services.deps import (
    CampaignDep,
    CurrentUser,
    CurrentUserOptional,
    ReposDep,
    ensure_campaign_creator,
)
from productlobby.server.services.events import record_event

router = APIRouter()


@router.post(
    "/{campaign_id}/events",
    response_model=ContributionEventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record Contribution Event",
    description="Record campaign activity. Metadata such as referrer, deviceType and timeOnPage feeds analytics.",
)
async def create_event(
    event_in: ContributionEventCreate, campaign: CampaignDep, repos: ReposDep, user: CurrentUserOptional
) -> ContributionEventRead:
    event = await record_event(repos, campaign, event_in.event_type, user=user, metadata=event_in.metadata)
    return ContributionEventRead.model_validate(event)


@router.get(
    "/{campaign_id}/events",
    response_model=List[ContributionEventRead],
    summary="List Contribution Events",
    responses={403: {"description": "Caller is not the creator"}},
)
async def list_events(
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    event_type: Optional[ContributionEventType] = Query(default=None),
) -> List[ContributionEventRead]:
    ensure_campaign_creator(campaign, user, "view contribution events")
    events = await repos.events.list_for_campaign(
        campaign.id, event_types=[event_type] if event_type is not None else None
    )
    return [ContributionEventRead.model_validate(e) for e in events]
