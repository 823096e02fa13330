"""
Milestone Endpoints.

Progress toward supporter, vote, share and age milestones, and recording
that a milestone was shared.
"""

from fastapi import APIRouter, status

from productlobby.core.cache import campaign_prefix
from productlobby.core.database.base import utc_now
from productlobby.core.database.entities import ContributionEventType
from productlobby.core.errors import InvalidRequestError
from productlobby.core.models.io import CampaignMilestones, MilestoneShareCreate, MilestoneShareRead
from productlobby.server.services.deps import CacheDep, CampaignDep, CurrentUser, ReposDep
from productlobby.server.services.events import record_event
from productlobby.server.services.metrics import SHARE_MILESTONE_ACTION, campaign_milestones

router = APIRouter()


@router.get(
    "/{campaign_id}/milestones",
    response_model=CampaignMilestones,
    summary="Milestone Progress",
    description="Every milestone with its progress, achieved milestones first.",
)
async def read_milestones(campaign: CampaignDep, repos: ReposDep) -> CampaignMilestones:
    report = await campaign_milestones(repos, campaign)
    return CampaignMilestones(campaign_id=campaign.id, **report.model_dump())


@router.post(
    "/{campaign_id}/milestones",
    response_model=MilestoneShareRead,
    status_code=status.HTTP_201_CREATED,
    summary="Share Milestone",
    description="Record that the caller shared a milestone. The first share of a milestone dates its achievement.",
    responses={400: {"description": "Unknown action"}},
)
async def share_milestone(
    share: MilestoneShareCreate, campaign: CampaignDep, user: CurrentUser, repos: ReposDep, cache: CacheDep
) -> MilestoneShareRead:
    if share.action != SHARE_MILESTONE_ACTION:
        raise InvalidRequestError("Invalid action")

    # stored camelCase, matching what clients send for other events
    metadata = {
        "action": share.action,
        "milestoneId": share.milestone_id,
        "milestoneType": share.milestone_type,
        "milestoneThreshold": share.milestone_threshold,
        "shareText": share.share_text,
        "shareUrl": share.share_url,
        "sharedAt": utc_now().isoformat(),
    }
    event = await record_event(repos, campaign, ContributionEventType.SOCIAL_SHARE, user=user, metadata=metadata)
    await cache.delete_prefix(campaign_prefix(campaign.id))
    return MilestoneShareRead(event_id=event.id, message="Milestone share recorded successfully")
