"""Pydantic schemas shared by the directory config and the HTTP surface."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SupportContact(BaseModel):
    model_config = ConfigDict(frozen=True)

    email_address: Optional[str] = None
    matrix_id: Optional[str] = None
    role: Optional[str] = None


class PublicRoom(BaseModel):
    """Entry of the static public room list; absent optionals are not serialised."""

    model_config = ConfigDict(frozen=True)

    avatar_url: Optional[str] = None
    canonical_alias: Optional[str] = None
    guest_can_join: bool
    join_rule: Optional[str] = None
    name: Optional[str] = None
    num_joined_members: int = Field(..., ge=0)
    room_id: str
    room_type: str
    topic: Optional[str] = None
    world_readable: bool


class ResolvedAlias(BaseModel):
    """Answer to a directory query; ``room_id`` is always domain-qualified."""

    room_id: str
    servers: List[str]


class PublicRoomsPage(BaseModel):
    chunk: List[PublicRoom]
    prev_batch: Optional[str] = None
    next_batch: Optional[str] = None
    total_room_count_estimate: int


class WellKnownServer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server: str = Field(..., alias="m.server")


class WellKnownSupport(BaseModel):
    support_page: Optional[str] = None
    contacts: List[SupportContact] = Field(default_factory=list)


class ServerVersion(BaseModel):
    name: str
    version: str


class VersionResponse(BaseModel):
    server: ServerVersion


class MatrixErrorBody(BaseModel):
    errcode: str
    error: str
