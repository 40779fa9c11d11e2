from fastapi import APIRouter, Depends

from rocketfuel.dependencies import get_tag_service
from rocketfuel.services.tag_service import TagService

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=list[str])
async def search_tags(search: str | None = None, tags: TagService = Depends(get_tag_service)):
    return await tags.get_tags(search)


@router.get("/popular", response_model=list[str])
async def popular_tags(tags: TagService = Depends(get_tag_service)):
    return await tags.get_popular_tags()
