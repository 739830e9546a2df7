"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from .models import Post, Member, Matching, PostType, SortDirection


class IPostRepository(ABC):
    """Post repository interface"""

    @abstractmethod
    async def find_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID, with its author loaded"""
        pass

    @abstractmethod
    async def find_page(
        self,
        offset: int,
        limit: int,
        direction: SortDirection
    ) -> Tuple[List[Post], int]:
        """Find a page of posts ordered by creation time, with the total count"""
        pass

    @abstractmethod
    async def find_page_by_type(
        self,
        post_type: PostType,
        offset: int,
        limit: int,
        direction: SortDirection
    ) -> Tuple[List[Post], int]:
        """Find a page of posts of one type ordered by creation time, with the total count"""
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Insert a new post or update an existing one"""
        pass

    @abstractmethod
    async def delete_by_id(self, post_id: int) -> None:
        """Delete post permanently"""
        pass


class IMemberRepository(ABC):
    """Member repository interface"""

    @abstractmethod
    async def find_by_id(self, member_id: int) -> Optional[Member]:
        """Find member by ID"""
        pass


class IMatchingRepository(ABC):
    """Matching repository interface"""

    @abstractmethod
    async def find_all_by_post_id(self, post_id: int) -> List[Matching]:
        """Find every matching of a post"""
        pass


class IUnitOfWork(ABC):
    """
    Scoped, atomic interaction with the store

    Used as ``async with uow:``. Commits when the block exits normally,
    rolls back when it raises, and releases its resources either way.
    """

    posts: IPostRepository
    members: IMemberRepository
    matchings: IMatchingRepository

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb) -> None:
        pass
