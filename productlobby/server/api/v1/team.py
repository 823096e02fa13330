"""
Campaign Team Endpoints.

The campaign creator invites collaborators by e-mail and removes them; an
invited user accepts from their own account. The roster is public.
"""

from fastapi import APIRouter, status

from productlobby.core.database.entities import TeamMember, TeamMemberStatus, TeamRole
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError
from productlobby.core.logging_config import get_logger
from productlobby.core.models.io import TeamInvite, TeamMemberRead, TeamRoster
from productlobby.core.text import is_valid_email
from productlobby.server.services.deps import CampaignDep, CurrentUser, ReposDep, ensure_campaign_creator

logger = get_logger(__name__)

router = APIRouter()

VALID_ROLES = {role.value for role in TeamRole}


@router.get(
    "/{campaign_id}/team",
    response_model=TeamRoster,
    summary="Team Roster",
    description="Active members and pending invitations.",
)
async def read_team(campaign: CampaignDep, repos: ReposDep) -> TeamRoster:
    entries = await repos.team.list_for_campaign(campaign.id)
    return TeamRoster(
        members=[TeamMemberRead.model_validate(m) for m in entries if m.status == TeamMemberStatus.ACTIVE],
        pending=[TeamMemberRead.model_validate(m) for m in entries if m.status == TeamMemberStatus.PENDING],
    )


@router.post(
    "/{campaign_id}/team",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Invite Team Member",
    responses={
        400: {"description": "Invalid e-mail address or role"},
        403: {"description": "Caller is not the creator"},
        409: {"description": "Already a member or already invited"},
    },
)
async def invite_member(
    invite: TeamInvite, campaign: CampaignDep, user: CurrentUser, repos: ReposDep
) -> TeamMemberRead:
    email = invite.email.strip().lower()
    if not is_valid_email(email):
        raise InvalidRequestError("Invalid email address")
    if invite.role not in VALID_ROLES:
        raise InvalidRequestError("Invalid role", details=sorted(VALID_ROLES))
    ensure_campaign_creator(campaign, user, "add team members")

    existing = await repos.team.get_by_email(campaign.id, email)
    if existing is not None:
        if existing.status == TeamMemberStatus.ACTIVE:
            raise ConflictError("User is already a team member")
        raise ConflictError("Invitation already sent to this email")

    member = await repos.team.create(
        TeamMember(campaign_id=campaign.id, email=email, role=TeamRole(invite.role), invited_by=user.id)
    )
    logger.info(f"Invited {email} to campaign {campaign.id} as {invite.role}")
    return TeamMemberRead.model_validate(member)


@router.post(
    "/{campaign_id}/team/accept",
    response_model=TeamMemberRead,
    summary="Accept Invitation",
    description="Accept the pending invitation addressed to the caller's e-mail.",
    responses={404: {"description": "No pending invitation for the caller"}},
)
async def accept_invitation(campaign: CampaignDep, user: CurrentUser, repos: ReposDep) -> TeamMemberRead:
    member = await repos.team.get_by_email(campaign.id, user.email)
    if member is None or member.status != TeamMemberStatus.PENDING:
        raise NotFoundError("Invitation", user.email)
    member = await repos.team.accept(member, user.id)
    return TeamMemberRead.model_validate(member)


@router.delete(
    "/{campaign_id}/team/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Team Member",
    description="Remove a member or revoke a pending invitation.",
    responses={403: {"description": "Caller is not the creator"}},
)
async def remove_member(member_id: str, campaign: CampaignDep, user: CurrentUser, repos: ReposDep) -> None:
    ensure_campaign_creator(campaign, user, "remove team members")
    member = await repos.team.get_by_id(member_id)
    if member is None or member.campaign_id != campaign.id:
        raise NotFoundError("Team member", member_id)
    await repos.team.delete(member.id)
