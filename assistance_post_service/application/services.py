"""
Application services - Business logic layer
"""
from typing import Callable, List, Optional
import logging
import math

from ..domain.models import (
    Matching, MatchingStatus, MemberSummary, Post, PostDraft, PostPage,
    PostStatus, PostSummary, PostType, SortDirection
)
from ..domain.repositories import IUnitOfWork
from ..domain.exceptions import NotFoundError, InvalidArgumentError, ForbiddenError
from ..kafka_producer import KafkaProducerManager

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[..., IUnitOfWork]

# Largest OFFSET PostgreSQL accepts (bigint)
MAX_OFFSET = 2 ** 63 - 1


def determine_post_status(matchings: List[Matching]) -> PostStatus:
    """A post is finished as soon as one of its matchings is done"""
    if not matchings:
        return PostStatus.RECRUITING

    is_completed = any(
        matching.matching_status == MatchingStatus.DONE for matching in matchings
    )
    return PostStatus.FINISHED if is_completed else PostStatus.RECRUITING


def parse_sort_direction(sort: str) -> SortDirection:
    """Parse "asc"/"desc" in any letter case"""
    try:
        return SortDirection(sort.upper())
    except (ValueError, AttributeError):
        raise InvalidArgumentError("invalid sort method")


class PostService:
    """Post service - handles assistance post lifecycle and queries"""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        kafka_producer: Optional[KafkaProducerManager] = None
    ):
        self.uow_factory = uow_factory
        self.kafka_producer = kafka_producer

    async def get_post(self, post_id: int) -> PostSummary:
        """Get a single post with its author and current status"""
        async with self.uow_factory(read_only=True) as uow:
            post = await uow.posts.find_by_id(post_id)
            if not post:
                raise NotFoundError("no such post")

            return await self._to_summary(uow, post)

    async def get_posts(
        self,
        page: int,
        size: int,
        sort: str,
        post_type: Optional[PostType] = None
    ) -> PostPage:
        """
        Get one page of posts ordered by creation time

        Args:
            page: 1-based page number, values below 1 fetch the first page
            size: Page size
            sort: "asc" or "desc", case-insensitive
            post_type: Optional post type filter

        Returns:
            PostPage with the summaries, the filtered total and the last-page flag
        """
        direction = parse_sort_direction(sort)
        if size < 1:
            raise InvalidArgumentError("page size must be positive")

        offset = min(max(page - 1, 0) * size, MAX_OFFSET)

        async with self.uow_factory(read_only=True) as uow:
            if post_type is not None:
                posts, total_count = await uow.posts.find_page_by_type(
                    post_type, offset, size, direction
                )
            else:
                posts, total_count = await uow.posts.find_page(offset, size, direction)

            items = [await self._to_summary(uow, post) for post in posts]

        # Compared against the requested page, not the normalized one
        total_pages = math.ceil(total_count / size)
        is_last = page >= total_pages

        return PostPage(items=items, total_count=total_count, is_last=is_last)

    async def create_post(self, draft: PostDraft, member_id: int) -> int:
        """Create a post written by the given member and return its ID"""
        async with self.uow_factory(read_only=False) as uow:
            member = await uow.members.find_by_id(member_id)
            if not member:
                raise NotFoundError("no such member")

            post = await uow.posts.save(Post.from_draft(draft, member))

        logger.info(f"Member {member_id} created post {post.id}")

        if self.kafka_producer:
            await self.kafka_producer.publish_post_created(
                post.id,
                member_id,
                self._event_payload(post)
            )

        return post.id

    async def update_post(self, post_id: int, draft: PostDraft, member_id: int) -> int:
        """Replace the editable fields of a post; only its author may do so"""
        async with self.uow_factory(read_only=False) as uow:
            post = await self._get_own_post(uow, post_id, member_id)
            post.apply_draft(draft)
            post = await uow.posts.save(post)

        logger.info(f"Member {member_id} updated post {post_id}")

        if self.kafka_producer:
            await self.kafka_producer.publish_post_updated(
                post_id,
                member_id,
                self._event_payload(post)
            )

        return post_id

    async def delete_post(self, post_id: int, member_id: int) -> None:
        """Delete a post permanently; only its author may do so"""
        async with self.uow_factory(read_only=False) as uow:
            await self._get_own_post(uow, post_id, member_id)
            # Matchings of the post are left in place
            await uow.posts.delete_by_id(post_id)

        logger.info(f"Member {member_id} deleted post {post_id}")

        if self.kafka_producer:
            await self.kafka_producer.publish_post_deleted(post_id, member_id)

    async def _get_own_post(self, uow: IUnitOfWork, post_id: int, member_id: int) -> Post:
        post = await uow.posts.find_by_id(post_id)
        if not post:
            raise NotFoundError("no such post")

        if not post.is_author(member_id):
            raise ForbiddenError("only the author may modify this post")

        return post

    async def _to_summary(self, uow: IUnitOfWork, post: Post) -> PostSummary:
        """Flatten a post and resolve its status from the current matchings"""
        matchings = await uow.matchings.find_all_by_post_id(post.id)

        return PostSummary(
            id=post.id,
            author=MemberSummary.from_member(post.author),
            title=post.title,
            assistance_type=post.assistance_type,
            start_time=post.schedule.start_time,
            end_time=post.schedule.end_time,
            schedule_type=post.schedule.schedule_type,
            schedule_details=post.schedule.schedule_details,
            district=post.district,
            content=post.content,
            post_type=post.post_type,
            post_status=determine_post_status(matchings),
            disability_type=post.disability_type,
            created_at=post.created_at,
            modified_at=post.modified_at
        )

    @staticmethod
    def _event_payload(post: Post) -> dict:
        return {
            "post_id": post.id,
            "author_id": post.author.id,
            "title": post.title,
            "post_type": post.post_type.value,
            "assistance_type": post.assistance_type.value,
            "district": post.district.value,
            "created_at": post.created_at.isoformat() if post.created_at else None,
            "updated_at": post.modified_at.isoformat() if post.modified_at else None
        }
