"""Schemas for user profiles pulled from the profile store."""

from __future__ import annotations

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Display profile of a user. Only ``id`` is guaranteed."""

    id: int
    username: str | None = None
    avatar_url: str | None = None
