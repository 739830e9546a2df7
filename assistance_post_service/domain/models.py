"""
Domain models - Core business entities
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
from enum import Enum


class AssistanceType(str, Enum):
    """Kind of assistance a post asks for or offers"""
    EDUCATION = "EDUCATION"
    HOUSEWORK = "HOUSEWORK"
    ETC = "ETC"


class PostType(str, Enum):
    """Whether the author offers help or needs it"""
    GIVER = "GIVER"
    TAKER = "TAKER"


class ScheduleType(str, Enum):
    """Schedule recurrence"""
    REGULARLY = "REGULARLY"
    IRREGULARLY = "IRREGULARLY"


class District(str, Enum):
    """District the assistance takes place in"""
    DONG_GU = "DONG_GU"
    SEO_GU = "SEO_GU"
    NAM_GU = "NAM_GU"
    BUK_GU = "BUK_GU"
    GWANGSAN_GU = "GWANGSAN_GU"


class DisabilityType(str, Enum):
    """Disability classification"""
    PHYSICAL = "PHYSICAL"
    VISUAL = "VISUAL"
    HEARING = "HEARING"
    SPEECH = "SPEECH"
    INTELLECTUAL = "INTELLECTUAL"
    AUTISM = "AUTISM"
    MENTAL = "MENTAL"
    BRAIN_LESION = "BRAIN_LESION"
    ETC = "ETC"
    NONE = "NONE"


class Gender(str, Enum):
    """Member gender"""
    MALE = "MALE"
    FEMALE = "FEMALE"


class MatchingStatus(str, Enum):
    """Matching progress"""
    PENDING = "PENDING"
    PROGRESS = "PROGRESS"
    DONE = "DONE"


class PostStatus(str, Enum):
    """Derived post status"""
    RECRUITING = "RECRUITING"
    FINISHED = "FINISHED"


class SortDirection(str, Enum):
    """Ordering of post listings by creation time"""
    ASC = "ASC"
    DESC = "DESC"


@dataclass
class Member:
    """Member domain model (read-only in this service)"""
    id: int
    name: str
    email: str
    nickname: Optional[str] = None
    profile_image_url: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    disability_type: Optional[DisabilityType] = None


@dataclass
class Schedule:
    """Schedule embedded in a post"""
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType
    schedule_details: Optional[str] = None


@dataclass
class PostDraft:
    """Fields a member supplies when creating or editing a post"""
    title: str
    assistance_type: AssistanceType
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType
    district: District
    content: str
    post_type: PostType
    schedule_details: Optional[str] = None

    def to_schedule(self) -> Schedule:
        """Build a fresh schedule owned by a single post"""
        return Schedule(
            start_time=self.start_time,
            end_time=self.end_time,
            schedule_type=self.schedule_type,
            schedule_details=self.schedule_details
        )


@dataclass
class Post:
    """Post domain model"""
    author: Member
    title: str
    assistance_type: AssistanceType
    schedule: Schedule
    district: District
    content: str
    post_type: PostType
    disability_type: Optional[DisabilityType] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @classmethod
    def from_draft(cls, draft: PostDraft, author: Member) -> "Post":
        """Create a new, not yet persisted post written by ``author``"""
        return cls(
            author=author,
            title=draft.title,
            assistance_type=draft.assistance_type,
            schedule=draft.to_schedule(),
            district=draft.district,
            content=draft.content,
            post_type=draft.post_type,
            disability_type=author.disability_type
        )

    def is_author(self, member_id: int) -> bool:
        """Check if the given member wrote this post"""
        return self.author.id == member_id

    def apply_draft(self, draft: PostDraft) -> None:
        """Replace every editable field with the draft's values"""
        self.title = draft.title
        self.assistance_type = draft.assistance_type
        self.schedule = draft.to_schedule()
        self.district = draft.district
        self.content = draft.content
        self.post_type = draft.post_type


@dataclass
class Matching:
    """Matching between a post and a helper (owned by the matching feature)"""
    id: int
    post_id: int
    matching_status: MatchingStatus
    created_at: Optional[datetime] = None


@dataclass
class MemberSummary:
    """Public projection of a member"""
    member_id: int
    name: str
    email: str
    nickname: Optional[str] = None
    profile_image_url: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    disability_type: Optional[DisabilityType] = None

    @classmethod
    def from_member(cls, member: Member) -> "MemberSummary":
        return cls(
            member_id=member.id,
            name=member.name,
            email=member.email,
            nickname=member.nickname,
            profile_image_url=member.profile_image_url,
            age=member.age,
            gender=member.gender,
            disability_type=member.disability_type
        )


@dataclass
class PostSummary:
    """Post with its schedule flattened and its status resolved"""
    id: int
    author: MemberSummary
    title: str
    assistance_type: AssistanceType
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType
    schedule_details: Optional[str]
    district: District
    content: str
    post_type: PostType
    post_status: PostStatus
    disability_type: Optional[DisabilityType] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


@dataclass
class PostPage:
    """One page of post summaries"""
    items: List[PostSummary] = field(default_factory=list)
    total_count: int = 0
    is_last: bool = True
