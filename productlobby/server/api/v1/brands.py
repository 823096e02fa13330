"""
Brand Endpoints.

Brands are the companies campaigns are aimed at.
"""

from typing import List

from fastapi import APIRouter, Query, status

from productlobby.core.database.entities import Brand
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError
from productlobby.core.models.io import BrandCreate, BrandRead, CampaignRead
from productlobby.server.services.deps import CurrentUser, ReposDep

router = APIRouter()


@router.post(
    "",
    response_model=BrandRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Brand",
    responses={409: {"description": "Slug already in use"}},
)
async def create_brand(brand_in: BrandCreate, user: CurrentUser, repos: ReposDep) -> BrandRead:
    slug = brand_in.resolved_slug()
    if not slug:
        raise InvalidRequestError("Brand name must contain letters or digits")
    if await repos.brands.get_by_slug(slug) is not None:
        raise ConflictError(f"Brand slug '{slug}' already exists")
    brand = await repos.brands.create(Brand(name=brand_in.name, slug=slug, website=brand_in.website))
    return BrandRead.model_validate(brand)


@router.get("", response_model=List[BrandRead], summary="List Brands")
async def list_brands(
    repos: ReposDep,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[BrandRead]:
    return [BrandRead.model_validate(b) for b in await repos.brands.list(limit=limit, offset=offset)]


async def _load_brand(repos, identifier: str) -> Brand:
    brand = await repos.brands.get_by_id(identifier) or await repos.brands.get_by_slug(identifier)
    if brand is None:
        raise NotFoundError("Brand", identifier)
    return brand


@router.get("/{brand_id}", response_model=BrandRead, summary="Get Brand")
async def read_brand(brand_id: str, repos: ReposDep) -> BrandRead:
    return BrandRead.model_validate(await _load_brand(repos, brand_id))


@router.get(
    "/{brand_id}/campaigns",
    response_model=List[CampaignRead],
    summary="Brand Campaigns",
    description="Campaigns aimed at a brand, strongest signal first.",
)
async def list_brand_campaigns(
    brand_id: str,
    repos: ReposDep,
    limit: int = Query(default=20, ge=1, le=100),
) -> List[CampaignRead]:
    brand = await _load_brand(repos, brand_id)
    campaigns, _ = await repos.campaigns.search(brand_id=brand.id, sort="signal", limit=limit)
    return [CampaignRead.model_validate(c) for c in campaigns]
