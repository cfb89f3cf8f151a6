"""Pydantic schemas for request/response bodies of the shortlinks API.

Schema Hierarchy
=================
::
    LinkCreate (Input)
    ├─ url: str | None
    └─ customCode: str | None

    LinkCreated (Output, 201)
    ├─ shortUrl: str
    ├─ code: str
    └─ targetUrl: str

    LinkOut (Output)
    ├─ code: str
    ├─ targetUrl: str
    ├─ clicks: int
    ├─ lastClickedAt: datetime | None
    └─ createdAt: datetime

    DeleteResponse (Output)
    └─ success: bool

    HealthResponse (Output)
    ├─ ok: bool
    └─ version: str

Key Behaviours
===============
- JSON uses camelCase names; Python attributes stay snake_case (aliases).
- ``LinkCreate`` does no URL/code validation of its own: the allocator owns
  those rules so the API can answer 400 with a specific message.
- ``LinkOut.from_link`` copies a ``Link`` ORM object field by field.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "LinkCreate",
    "LinkCreated",
    "LinkOut",
    "DeleteResponse",
    "HealthResponse",
]


class LinkCreate(BaseModel):
    url: str | None = None
    custom_code: str | None = Field(None, alias="customCode")

    model_config = ConfigDict(populate_by_name=True)


class LinkCreated(BaseModel):
    short_url: str = Field(..., alias="shortUrl")
    code: str
    target_url: str = Field(..., alias="targetUrl")

    model_config = ConfigDict(populate_by_name=True)


class LinkOut(BaseModel):
    code: str
    target_url: str = Field(..., alias="targetUrl")
    clicks: int
    last_clicked_at: datetime.datetime | None = Field(None, alias="lastClickedAt")
    created_at: datetime.datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_link(cls, link) -> "LinkOut":
        return cls(
            code=link.code,
            target_url=link.target_url,
            clicks=link.clicks,
            last_clicked_at=link.last_clicked_at,
            created_at=link.created_at,
        )


class DeleteResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    ok: bool = True
    version: str
