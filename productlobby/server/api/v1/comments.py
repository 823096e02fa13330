"""
Comment Endpoints.

Threaded campaign comments. Authors edit their own comments; a comment can be
deleted by its author or by the campaign creator, which also removes its
direct replies.
"""

from typing import Dict, List

from fastapi import APIRouter, status

from productlobby.core.cache import campaign_prefix
from productlobby.core.database.base import utc_now
from productlobby.core.database.entities import Comment
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from productlobby.core.models.io import CommentCreate, CommentRead, CommentUpdate
from productlobby.server.services.deps import CacheDep, CampaignDep, CurrentUser, ReposDep

router = APIRouter()


def build_threads(comments: List[Comment]) -> List[CommentRead]:
    """Nest replies under their parents, keeping posting order at every level.

    Replies whose parent is gone are shown at the top level.
    """
    nodes: Dict[str, CommentRead] = {c.id: CommentRead.model_validate(c) for c in comments}
    roots: List[CommentRead] = []
    for comment in comments:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_id) if comment.parent_id else None
        if parent is None:
            roots.append(node)
        else:
            parent.replies.append(node)
    return roots


async def _load_comment(repos: RepoBundle, comment_id: str) -> Comment:
    comment = await repos.comments.get_by_id(comment_id)
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    return comment


@router.get(
    "/campaigns/{campaign_id}/comments",
    response_model=List[CommentRead],
    summary="List Comments",
    description="Comment threads in posting order, replies nested under their parent.",
)
async def list_comments(campaign: CampaignDep, repos: ReposDep) -> List[CommentRead]:
    return build_threads(await repos.comments.list_for_campaign(campaign.id))


@router.post(
    "/campaigns/{campaign_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post Comment",
    responses={400: {"description": "Parent comment belongs to another campaign"}},
)
async def create_comment(
    comment_in: CommentCreate, campaign: CampaignDep, user: CurrentUser, repos: ReposDep, cache: CacheDep
) -> CommentRead:
    if comment_in.parent_id is not None:
        parent = await _load_comment(repos, comment_in.parent_id)
        if parent.campaign_id != campaign.id:
            raise InvalidRequestError("Parent comment belongs to another campaign")

    comment = await repos.comments.create(
        Comment(campaign_id=campaign.id, user_id=user.id, parent_id=comment_in.parent_id, content=comment_in.content)
    )
    await cache.delete_prefix(campaign_prefix(campaign.id))
    return CommentRead.model_validate(comment)


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentRead,
    summary="Edit Comment",
    responses={403: {"description": "Caller is not the author"}, 404: {"description": "Comment not found"}},
)
async def update_comment(
    comment_id: str, comment_in: CommentUpdate, user: CurrentUser, repos: ReposDep, cache: CacheDep
) -> CommentRead:
    comment = await _load_comment(repos, comment_id)
    if comment.user_id != user.id:
        raise PermissionDeniedError("You can only edit your own comments")

    comment.content = comment_in.content
    comment.updated_at = utc_now()
    comment = await repos.comments.update(comment)
    await cache.delete_prefix(campaign_prefix(comment.campaign_id))
    return CommentRead.model_validate(comment)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    responses={403: {"description": "Caller is neither author nor campaign creator"}},
)
async def delete_comment(comment_id: str, user: CurrentUser, repos: ReposDep, cache: CacheDep) -> None:
    comment = await _load_comment(repos, comment_id)
    if comment.user_id != user.id:
        campaign = await repos.campaigns.get_by_id(comment.campaign_id)
        if campaign is None or campaign.creator_user_id != user.id:
            raise PermissionDeniedError("Only the author or the campaign creator can delete this comment")

    await repos.comments.delete_thread(comment.id)
    await cache.delete_prefix(campaign_prefix(comment.campaign_id))
