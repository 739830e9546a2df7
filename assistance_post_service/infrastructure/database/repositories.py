"""
Repository implementations - Data access layer
"""
from typing import Optional, List, Tuple
import asyncpg
import logging

from ...domain.models import (
    AssistanceType, DisabilityType, District, Gender, Matching, MatchingStatus,
    Member, Post, PostType, Schedule, ScheduleType, SortDirection
)
from ...domain.repositories import (
    IPostRepository, IMemberRepository, IMatchingRepository, IUnitOfWork
)
from .connection import ConnectionSession, DatabaseConnection

logger = logging.getLogger(__name__)


POST_SELECT = """
    SELECT p.id, p.title, p.assistance_type, p.start_time, p.end_time,
           p.schedule_type, p.schedule_details, p.district, p.content,
           p.post_type, p.disability_type, p.created_at, p.modified_at,
           m.id AS author_id, m.name AS author_name, m.nickname AS author_nickname,
           m.email AS author_email, m.profile_image_url AS author_profile_image_url,
           m.age AS author_age, m.gender AS author_gender,
           m.disability_type AS author_disability_type
    FROM posts p
    JOIN members m ON m.id = p.author_id
"""


def _optional_enum(enum_cls, value):
    return enum_cls(value) if value is not None else None


def _enum_value(value):
    return value.value if value is not None else None


class PostRepository(IPostRepository):
    """Post repository implementation using PostgreSQL"""

    def __init__(self, db: ConnectionSession):
        self.db = db

    def _row_to_post(self, row: Optional[asyncpg.Record]) -> Optional[Post]:
        """Convert joined post/member row to Post model"""
        if not row:
            return None

        author = Member(
            id=row["author_id"],
            name=row["author_name"],
            email=row["author_email"],
            nickname=row["author_nickname"],
            profile_image_url=row["author_profile_image_url"],
            age=row["author_age"],
            gender=_optional_enum(Gender, row["author_gender"]),
            disability_type=_optional_enum(DisabilityType, row["author_disability_type"])
        )
        schedule = Schedule(
            start_time=row["start_time"],
            end_time=row["end_time"],
            schedule_type=ScheduleType(row["schedule_type"]),
            schedule_details=row["schedule_details"]
        )
        return Post(
            id=row["id"],
            author=author,
            title=row["title"],
            assistance_type=AssistanceType(row["assistance_type"]),
            schedule=schedule,
            district=District(row["district"]),
            content=row["content"],
            post_type=PostType(row["post_type"]),
            disability_type=_optional_enum(DisabilityType, row["disability_type"]),
            created_at=row["created_at"],
            modified_at=row["modified_at"]
        )

    async def find_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID"""
        row = await self.db.fetch_one(f"{POST_SELECT} WHERE p.id = $1", post_id)
        return self._row_to_post(row)

    async def find_page(
        self,
        offset: int,
        limit: int,
        direction: SortDirection
    ) -> Tuple[List[Post], int]:
        """Find a page of posts ordered by creation time"""
        order = direction.value
        rows = await self.db.fetch_all(
            f"""
            {POST_SELECT}
            ORDER BY p.created_at {order}, p.id {order}
            LIMIT $1 OFFSET $2
            """,
            limit, offset
        )
        total = await self.db.fetch_value("SELECT COUNT(*) FROM posts")
        return [self._row_to_post(row) for row in rows], total

    async def find_page_by_type(
        self,
        post_type: PostType,
        offset: int,
        limit: int,
        direction: SortDirection
    ) -> Tuple[List[Post], int]:
        """Find a page of posts of one type ordered by creation time"""
        order = direction.value
        rows = await self.db.fetch_all(
            f"""
            {POST_SELECT}
            WHERE p.post_type = $1
            ORDER BY p.created_at {order}, p.id {order}
            LIMIT $2 OFFSET $3
            """,
            post_type.value, limit, offset
        )
        total = await self.db.fetch_value(
            "SELECT COUNT(*) FROM posts WHERE post_type = $1",
            post_type.value
        )
        return [self._row_to_post(row) for row in rows], total

    async def save(self, post: Post) -> Post:
        """Insert a new post or update an existing one"""
        if post.id is None:
            row = await self.db.fetch_one(
                """
                INSERT INTO posts (author_id, title, assistance_type, start_time, end_time,
                                   schedule_type, schedule_details, district, content,
                                   post_type, disability_type)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                RETURNING id, created_at, modified_at
                """,
                post.author.id,
                post.title,
                post.assistance_type.value,
                post.schedule.start_time,
                post.schedule.end_time,
                post.schedule.schedule_type.value,
                post.schedule.schedule_details,
                post.district.value,
                post.content,
                post.post_type.value,
                _enum_value(post.disability_type)
            )
            post.id = row["id"]
            post.created_at = row["created_at"]
            post.modified_at = row["modified_at"]
            return post

        row = await self.db.fetch_one(
            """
            UPDATE posts
            SET title = $1, assistance_type = $2, start_time = $3, end_time = $4,
                schedule_type = $5, schedule_details = $6, district = $7,
                content = $8, post_type = $9, modified_at = NOW()
            WHERE id = $10
            RETURNING modified_at
            """,
            post.title,
            post.assistance_type.value,
            post.schedule.start_time,
            post.schedule.end_time,
            post.schedule.schedule_type.value,
            post.schedule.schedule_details,
            post.district.value,
            post.content,
            post.post_type.value,
            post.id
        )
        post.modified_at = row["modified_at"]
        return post

    async def delete_by_id(self, post_id: int) -> None:
        """Delete post"""
        await self.db.execute("DELETE FROM posts WHERE id = $1", post_id)


class MemberRepository(IMemberRepository):
    """Member repository implementation using PostgreSQL"""

    def __init__(self, db: ConnectionSession):
        self.db = db

    def _row_to_member(self, row: Optional[asyncpg.Record]) -> Optional[Member]:
        """Convert database row to Member model"""
        if not row:
            return None
        data = dict(row)
        data["gender"] = _optional_enum(Gender, data["gender"])
        data["disability_type"] = _optional_enum(DisabilityType, data["disability_type"])
        return Member(**data)

    async def find_by_id(self, member_id: int) -> Optional[Member]:
        """Find member by ID"""
        row = await self.db.fetch_one(
            """
            SELECT id, name, nickname, email, profile_image_url, age, gender, disability_type
            FROM members
            WHERE id = $1
            """,
            member_id
        )
        return self._row_to_member(row)


class MatchingRepository(IMatchingRepository):
    """Matching repository implementation using PostgreSQL"""

    def __init__(self, db: ConnectionSession):
        self.db = db

    async def find_all_by_post_id(self, post_id: int) -> List[Matching]:
        """Find every matching of a post"""
        rows = await self.db.fetch_all(
            """
            SELECT id, post_id, matching_status, created_at
            FROM matchings
            WHERE post_id = $1
            ORDER BY id
            """,
            post_id
        )
        return [
            Matching(
                id=row["id"],
                post_id=row["post_id"],
                matching_status=MatchingStatus(row["matching_status"]),
                created_at=row["created_at"]
            )
            for row in rows
        ]


class PostgresUnitOfWork(IUnitOfWork):
    """
    Unit of work over one pooled connection and one transaction

    Read-only units open a ``READ ONLY`` transaction.
    """

    def __init__(self, db: DatabaseConnection, read_only: bool = False):
        self.db = db
        self.read_only = read_only
        self._conn: Optional[asyncpg.Connection] = None
        self._transaction = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn = await self.db.acquire()
        try:
            self._transaction = self._conn.transaction(readonly=self.read_only)
            await self._transaction.start()
        except BaseException:
            await self.db.release(self._conn)
            self._conn = None
            raise

        session = ConnectionSession(self._conn)
        self.posts = PostRepository(session)
        self.members = MemberRepository(session)
        self.matchings = MatchingRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                await self._transaction.commit()
            else:
                logger.debug(f"Rolling back unit of work after {exc_type.__name__}")
                await self._transaction.rollback()
        finally:
            await self.db.release(self._conn)
            self._conn = None
            self._transaction = None
