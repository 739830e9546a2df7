"""
Shared fixtures: an in-memory store standing in for PostgreSQL.
"""
import copy
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest

from assistance_post_service.application.services import PostService
from assistance_post_service.domain.models import (
    AssistanceType, DisabilityType, District, Gender, Matching, MatchingStatus,
    Member, Post, PostDraft, PostType, ScheduleType, SortDirection
)
from assistance_post_service.domain.repositories import (
    IPostRepository, IMemberRepository, IMatchingRepository, IUnitOfWork
)
from assistance_post_service.kafka_producer import KafkaProducerManager

BASE_TIME = datetime(2024, 5, 1, 9, 0, 0)


class InMemoryStore:
    """Tables kept in dicts; rows are copied in and out like a real store."""

    def __init__(self):
        self.members: Dict[int, Member] = {}
        self.posts: Dict[int, Post] = {}
        self.matchings: List[Matching] = []
        self._next_post_id = 1
        self._ticks = 0

    def now(self) -> datetime:
        self._ticks += 1
        return BASE_TIME + timedelta(minutes=self._ticks)

    def add_member(self, member_id: int, **kwargs) -> Member:
        defaults = dict(
            name=f"member{member_id}", email=f"member{member_id}@example.com",
            nickname=f"nick{member_id}", profile_image_url=None, age=30,
            gender=Gender.FEMALE, disability_type=DisabilityType.VISUAL,
        )
        defaults.update(kwargs)
        member = Member(id=member_id, **defaults)
        self.members[member_id] = member
        return member

    def add_post(self, author_id: int, **kwargs) -> Post:
        draft = make_draft(**kwargs)
        post = Post.from_draft(draft, self.members[author_id])
        return self.insert_post(post)

    def add_matching(self, post_id: int, status: MatchingStatus) -> Matching:
        matching = Matching(id=len(self.matchings) + 1, post_id=post_id, matching_status=status)
        self.matchings.append(matching)
        return matching

    def insert_post(self, post: Post) -> Post:
        post.id = self._next_post_id
        self._next_post_id += 1
        post.created_at = post.modified_at = self.now()
        self.posts[post.id] = copy.deepcopy(post)
        return post


class InMemoryPostRepository(IPostRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_id(self, post_id: int) -> Optional[Post]:
        post = self.store.posts.get(post_id)
        return copy.deepcopy(post) if post else None

    async def find_page(self, offset: int, limit: int, direction: SortDirection) -> Tuple[List[Post], int]:
        return self._page(list(self.store.posts.values()), offset, limit, direction)

    async def find_page_by_type(
        self, post_type: PostType, offset: int, limit: int, direction: SortDirection
    ) -> Tuple[List[Post], int]:
        posts = [p for p in self.store.posts.values() if p.post_type == post_type]
        return self._page(posts, offset, limit, direction)

    def _page(self, posts, offset, limit, direction):
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=direction == SortDirection.DESC)
        return [copy.deepcopy(p) for p in posts[offset:offset + limit]], len(posts)

    async def save(self, post: Post) -> Post:
        if post.id is None:
            return self.store.insert_post(post)
        post.modified_at = self.store.now()
        self.store.posts[post.id] = copy.deepcopy(post)
        return post

    async def delete_by_id(self, post_id: int) -> None:
        self.store.posts.pop(post_id, None)


class InMemoryMemberRepository(IMemberRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_id(self, member_id: int) -> Optional[Member]:
        member = self.store.members.get(member_id)
        return copy.deepcopy(member) if member else None


class InMemoryMatchingRepository(IMatchingRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_all_by_post_id(self, post_id: int) -> List[Matching]:
        return [m for m in self.store.matchings if m.post_id == post_id]


class InMemoryUnitOfWork(IUnitOfWork):

    def __init__(self, store: InMemoryStore, read_only: bool = False):
        self.store = store
        self.read_only = read_only
        self.posts = InMemoryPostRepository(store)
        self.members = InMemoryMemberRepository(store)
        self.matchings = InMemoryMatchingRepository(store)
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.committed = True
        else:
            self.rolled_back = True


class RecordingUnitOfWorkFactory:
    """Opens in-memory units of work and remembers them."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.opened: List[InMemoryUnitOfWork] = []

    def __call__(self, read_only: bool = False) -> InMemoryUnitOfWork:
        uow = InMemoryUnitOfWork(self.store, read_only)
        self.opened.append(uow)
        return uow


def make_draft(**kwargs) -> PostDraft:
    defaults = dict(
        title="Need help with groceries",
        assistance_type=AssistanceType.HOUSEWORK,
        start_time=datetime(2024, 6, 1, 10, 0),
        end_time=datetime(2024, 6, 1, 12, 0),
        schedule_type=ScheduleType.REGULARLY,
        schedule_details="Every Saturday morning",
        district=District.BUK_GU,
        content="Looking for someone to go grocery shopping with me.",
        post_type=PostType.TAKER,
    )
    defaults.update(kwargs)
    return PostDraft(**defaults)


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_member(1)
    store.add_member(2, name="other", disability_type=DisabilityType.NONE)
    return store


@pytest.fixture
def uow_factory(store) -> RecordingUnitOfWorkFactory:
    return RecordingUnitOfWorkFactory(store)


@pytest.fixture
def kafka() -> AsyncMock:
    return AsyncMock(spec=KafkaProducerManager)


@pytest.fixture
def service(uow_factory, kafka) -> PostService:
    return PostService(uow_factory, kafka)
