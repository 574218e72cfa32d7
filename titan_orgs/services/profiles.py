"""Client for the user-profile store used to decorate responses.

Profiles are presentation only. They are fetched after every authorization
decision has been made, and a failing profile store yields bare user ids
instead of an error.
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import structlog

from titan_orgs.schemas.profiles import UserProfile

logger = structlog.get_logger()


class ProfileClientError(Exception):
    """Raised when the profile store cannot be queried."""


class ProfileClient:
    """HTTP client for the user-profile REST API."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 5.0,
        avatar_base_url: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.avatar_base_url = avatar_base_url.rstrip("/")
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)

    def fetch_profiles(self, user_ids: Iterable[int]) -> dict[int, UserProfile]:
        """Return profiles keyed by user id. Raises ``ProfileClientError``."""
        ids = sorted(set(user_ids))
        if not ids or not self.enabled:
            return {}

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(
                    f"{self.api_url}/users",
                    params={"ids": ",".join(str(i) for i in ids)},
                )
        except httpx.HTTPError as exc:
            raise ProfileClientError(f"Profile lookup failed: {exc}") from exc

        if response.status_code != 200:
            raise ProfileClientError(
                f"Profile lookup failed: {response.status_code} {response.text[:200]}"
            )

        try:
            items = response.json()["data"]
            profiles: dict[int, UserProfile] = {}
            for item in items:
                profile = UserProfile(
                    id=item["id"],
                    username=item.get("username"),
                    avatar_url=self._avatar_url(item.get("avatar")),
                )
                profiles[profile.id] = profile
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ProfileClientError(f"Malformed profile response: {exc!r}") from exc
        return profiles

    def profiles_for(self, user_ids: Iterable[int | None]) -> dict[int, UserProfile]:
        """Like ``fetch_profiles`` but never fails; unknown users get a bare profile."""
        ids = {uid for uid in user_ids if uid is not None}
        try:
            profiles = self.fetch_profiles(ids)
        except ProfileClientError as exc:
            logger.warning("profile_lookup_failed", user_count=len(ids), error=str(exc))
            profiles = {}
        for uid in ids:
            profiles.setdefault(uid, UserProfile(id=uid))
        return profiles

    def _avatar_url(self, avatar: str | None) -> str | None:
        if not avatar:
            return None
        if avatar.startswith(("http://", "https://")) or not self.avatar_base_url:
            return avatar
        return f"{self.avatar_base_url}/{avatar.lstrip('/')}"
