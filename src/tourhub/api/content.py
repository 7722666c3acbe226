"""Stories, community posts, and blog posts."""

from fastapi import APIRouter, Depends

from tourhub.auth.dependencies import CurrentIdentity, get_current_identity
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.content import ContentPostRead, StoryCreate, StoryRead
from tourhub.services.content_service import ContentService

router = APIRouter()


def _svc(db: Database = Depends(get_db)) -> ContentService:
    return ContentService(db)


@router.post("/stories", response_model=StoryRead, status_code=201)
async def create_story(
    body: StoryCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: ContentService = Depends(_svc),
):
    identity.ensure_self(body.email)
    return await svc.create_story(body)


@router.get("/stories", response_model=list[StoryRead])
async def list_stories(svc: ContentService = Depends(_svc)):
    return await svc.list_stories()


@router.get("/stories/{story_id}", response_model=StoryRead)
async def get_story(story_id: str, svc: ContentService = Depends(_svc)):
    return await svc.get_story(story_id)


@router.get("/community", response_model=list[ContentPostRead])
async def list_community_posts(svc: ContentService = Depends(_svc)):
    return await svc.list_community_posts()


@router.get("/blogs", response_model=list[ContentPostRead])
async def list_blog_posts(svc: ContentService = Depends(_svc)):
    return await svc.list_blog_posts()
