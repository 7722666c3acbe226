"""Content service — traveller stories, community posts, blog posts.

Stories are written through the API; community and blog posts are
seeded content that the API only reads.
"""

from datetime import datetime, timezone

import structlog

from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import NotFoundError
from tourhub.schemas.content import StoryCreate

logger = structlog.get_logger()


class ContentService:
    def __init__(self, db: Database):
        self.db = db

    # ─── Stories ────────────────────────────────────────

    async def create_story(self, body: StoryCreate) -> dict:
        """Stories are stamped with the poster's current name and photo."""
        with store_errors("submitting story"):
            user = await self.db.users.find_one({"email": body.email})
            if not user:
                raise NotFoundError("User not found")
            story = {
                "email": body.email,
                "title": body.title,
                "excerpt": body.excerpt,
                "content": body.content,
                "posterName": user.get("name"),
                "posterPhotoURL": user.get("photoURL"),
                "createdAt": datetime.now(timezone.utc),
            }
            await self.db.stories.insert_one(story)

        logger.info("story.created", story_id=str(story["_id"]), email=body.email)
        return to_document(story)

    async def list_stories(self) -> list[dict]:
        with store_errors("listing stories"):
            stories = await self.db.stories.find({}).to_list(None)
        return [to_document(s) for s in stories]

    async def get_story(self, story_id: str) -> dict:
        oid = parse_object_id(story_id, "story")
        with store_errors("fetching story"):
            story = await self.db.stories.find_one({"_id": oid})
        if not story:
            raise NotFoundError("Story not found")
        return to_document(story)

    # ─── Seeded content ─────────────────────────────────

    async def list_community_posts(self) -> list[dict]:
        with store_errors("listing community posts"):
            posts = await self.db.community.find({}).to_list(None)
        return [to_document(p) for p in posts]

    async def list_blog_posts(self) -> list[dict]:
        with store_errors("listing blog posts"):
            blogs = await self.db.blogs.find({}).to_list(None)
        return [to_document(b) for b in blogs]
