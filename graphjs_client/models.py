from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from graphjs_client.codec import coerce_date, coerce_uri, parse_map_safe, parse_string_list

ORIGIN_SERVER = "server"
ORIGIN_LOCAL = "local"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


@dataclass(frozen=True)
class Envelope:
    """Normalized reply of one backend call.

    ``payload`` is the whole JSON object, ``success`` included. ``origin`` is
    ``"local"`` when the client produced the envelope itself (validation or
    transport failure) rather than the backend.
    """

    success: bool = False
    reason: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)
    origin: str = ORIGIN_SERVER

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Envelope":
        payload = dict(data)
        if "success" not in payload:
            payload["success"] = False
        success = _as_bool(payload["success"])
        reason = payload.get("reason")
        return cls(
            success=success,
            reason=None if reason is None else str(reason),
            payload=payload,
            origin=ORIGIN_SERVER,
        )

    @classmethod
    def local_failure(cls, reason: str) -> "Envelope":
        return cls(
            success=False,
            reason=reason,
            payload={"success": False, "reason": reason},
            origin=ORIGIN_LOCAL,
        )

    @property
    def is_local(self) -> bool:
        return self.origin == ORIGIN_LOCAL

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def get_str(self, key: str) -> Optional[str]:
        value = self.payload.get(key)
        if value is None or isinstance(value, (dict, list)):
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.payload.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return default
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        if key not in self.payload:
            return default
        return _as_bool(self.payload[key])


class FeedType(Enum):
    WALL = "wall"
    TIMELINE = "timeline"


# Records


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)


def _optional_date(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return coerce_date(value)


def _optional_uri(value: Any) -> Optional[str]:
    if value is None:
        return None
    return coerce_uri(value)


def _count(value: Any) -> Any:
    return 0 if value is None else value


class UserProfile(_Record):
    username: str
    email: str = ""
    join_time: Optional[datetime] = Field(default=None, alias="jointime")
    avatar: Optional[str] = None
    birthday: Optional[datetime] = None
    about: Optional[str] = None
    follower_count: int = 0
    following_count: int = 0
    membership_count: int = 0

    @field_validator("join_time", "birthday", mode="before")
    @classmethod
    def decode_dates(cls, value: Any) -> Optional[datetime]:
        return _optional_date(value)

    @field_validator("avatar", mode="before")
    @classmethod
    def decode_avatar(cls, value: Any) -> Optional[str]:
        return _optional_uri(value)

    @field_validator("follower_count", "following_count", "membership_count", mode="before")
    @classmethod
    def decode_counts(cls, value: Any) -> Any:
        return _count(value)


class ForumThread(_Record):
    id: str
    title: str
    author_id: str = Field(alias="author")
    created: datetime = Field(alias="timestamp")
    contributors: dict[str, UserProfile] = Field(default_factory=dict)

    @field_validator("created", mode="before")
    @classmethod
    def decode_created(cls, value: Any) -> datetime:
        return coerce_date(value)

    @field_validator("contributors", mode="before")
    @classmethod
    def skip_bad_contributors(cls, value: Any) -> dict[str, UserProfile]:
        return parse_map_safe(UserProfile, value)


class ThreadMessage(_Record):
    id: str
    author_id: str = Field(alias="author")
    content: str
    created: datetime = Field(alias="timestamp")

    @field_validator("created", mode="before")
    @classmethod
    def decode_created(cls, value: Any) -> datetime:
        return coerce_date(value)


class Member(_Record):
    username: str
    avatar: Optional[str] = None

    @field_validator("avatar", mode="before")
    @classmethod
    def decode_avatar(cls, value: Any) -> Optional[str]:
        return _optional_uri(value)


class DirectMessage(_Record):
    # inbox/outbox entries are keyed by message id and may not repeat it
    id: str = ""
    from_user_id: Optional[str] = Field(default=None, alias="from")
    to_user_id: Optional[str] = Field(default=None, alias="to")
    content: Optional[str] = Field(default=None, alias="message")
    is_read: bool = False
    sent_time: Optional[datetime] = Field(default=None, alias="timestamp")

    @field_validator("sent_time", mode="before")
    @classmethod
    def decode_sent_time(cls, value: Any) -> Optional[datetime]:
        return _optional_date(value)


class Group(_Record):
    id: str
    title: str
    description: str = ""
    creator_id: str = Field(alias="creator")
    cover: Optional[str] = None
    members_counter: str = Field(default="", alias="count")
    member_ids: list[str] = Field(default_factory=list, alias="members")

    @field_validator("cover", mode="before")
    @classmethod
    def decode_cover(cls, value: Any) -> Optional[str]:
        return _optional_uri(value)

    @field_validator("member_ids", mode="before")
    @classmethod
    def keep_string_ids(cls, value: Any) -> list[str]:
        return parse_string_list(value)


class StarsStatEntry(_Record):
    title: str
    stars: int = Field(default=0, alias="star_count")

    @field_validator("stars", mode="before")
    @classmethod
    def decode_stars(cls, value: Any) -> Any:
        return _count(value)


class ContentComment(_Record):
    content: str
    create_time: datetime = Field(alias="createTime")
    author_id: str = Field(alias="author")

    @field_validator("create_time", mode="before")
    @classmethod
    def decode_create_time(cls, value: Any) -> datetime:
        return coerce_date(value)


# Results


@dataclass(frozen=True)
class CallResult:
    success: bool = False
    reason: Optional[str] = None

    @classmethod
    def from_envelope(cls, envelope: Envelope):
        return cls(success=envelope.success, reason=envelope.reason)


@dataclass(frozen=True)
class RegisterResult(CallResult):
    user_id: Optional[str] = None


@dataclass(frozen=True)
class LoginResult(CallResult):
    user_id: Optional[str] = None


@dataclass(frozen=True)
class ProfileResult(CallResult):
    profile: Optional[UserProfile] = None


@dataclass(frozen=True)
class CreateResult(CallResult):
    id: Optional[str] = None


@dataclass(frozen=True)
class ThreadResult(CallResult):
    title: Optional[str] = None
    messages: list[ThreadMessage] = field(default_factory=list)


@dataclass(frozen=True)
class ThreadsResult(CallResult):
    threads: list[ForumThread] = field(default_factory=list)


@dataclass(frozen=True)
class CountResult(CallResult):
    count: int = 0


@dataclass(frozen=True)
class FeedTokenResult(CallResult):
    token: Optional[str] = None


@dataclass(frozen=True)
class MembersResult(CallResult):
    members: dict[str, Member] = field(default_factory=dict)


@dataclass(frozen=True)
class FollowersResult(CallResult):
    followers: dict[str, Member] = field(default_factory=dict)


@dataclass(frozen=True)
class FollowingResult(CallResult):
    following: dict[str, Member] = field(default_factory=dict)


@dataclass(frozen=True)
class DirectMessageResult(CallResult):
    message: Optional[DirectMessage] = None


@dataclass(frozen=True)
class DirectMessagesResult(CallResult):
    messages: dict[str, DirectMessage] = field(default_factory=dict)


@dataclass(frozen=True)
class GroupsResult(CallResult):
    groups: list[Group] = field(default_factory=list)


@dataclass(frozen=True)
class GroupResult(CallResult):
    group: Optional[Group] = None


@dataclass(frozen=True)
class GroupMembersResult(CallResult):
    member_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class IsStarredResult(CallResult):
    count: int = 0
    starred_by_me: bool = False


@dataclass(frozen=True)
class StarsStatResult(CallResult):
    pages: dict[str, StarsStatEntry] = field(default_factory=dict)


@dataclass(frozen=True)
class CommentsResult(CallResult):
    comments: dict[str, ContentComment] = field(default_factory=dict)
