"""
Pydantic schemas for Assistance Post Service
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone

from .domain.models import (
    AssistanceType, DisabilityType, District, Gender, PostDraft, PostStatus,
    PostType, ScheduleType
)


class PostRequest(BaseModel):
    """Post creation / update request"""
    title: str = Field(..., min_length=1, max_length=255)
    assistance_type: AssistanceType
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType
    schedule_details: Optional[str] = None
    district: District
    content: str
    post_type: PostType

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Schedule columns are TIMESTAMP without time zone; store offsets as UTC"""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    def to_draft(self) -> PostDraft:
        return PostDraft(**self.model_dump())


class MemberResponse(BaseModel):
    """Author summary embedded in post responses"""
    member_id: int
    name: str
    nickname: Optional[str] = None
    profile_image_url: Optional[str] = None
    email: str
    age: Optional[int] = None
    gender: Optional[Gender] = None
    disability_type: Optional[DisabilityType] = None

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    """Post response"""
    id: int
    author: MemberResponse
    title: str
    assistance_type: AssistanceType
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType
    schedule_details: Optional[str] = None
    district: District
    content: str
    post_type: PostType
    post_status: PostStatus
    disability_type: Optional[DisabilityType] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PostListResponse(BaseModel):
    """Post list response"""
    posts: List[PostResponse]
    total_count: int
    is_last: bool


class PostIdResponse(BaseModel):
    """ID of a created or updated post"""
    post_id: int


class MessageResponse(BaseModel):
    """Generic message response"""
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response"""
    error: str
    detail: Optional[str] = None
    success: bool = False
