"""
Social graph service client — resolves who a user follows.

  GET {social_graph_url}/follow/following/{user_id}
  Authorization: Bearer <caller's token>

Response:
  [ { "userId", "name", "profilePicture" }, ... ]

The following feed must never fail because this service is down. Every
failure (transport error, timeout, non-2xx, null or malformed body) comes
back as a degraded, empty FollowingResult instead of an exception, and is
counted in social_graph_degraded_total. There is no retry: one bounded
attempt per feed request.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from pydantic import ValidationError

from geofeed.config import settings
from geofeed.schemas import AuthorProfile
from geofeed.telemetry import SOCIAL_GRAPH_DEGRADED_TOTAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowingResult:
    # followed user_id -> display profile, in upstream order
    profiles: dict[str, AuthorProfile] = field(default_factory=dict)
    degraded: bool = False
    reason: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.profiles

    @property
    def user_ids(self) -> list[str]:
        return list(self.profiles)

    @classmethod
    def degraded_empty(cls, reason: str) -> "FollowingResult":
        return cls(degraded=True, reason=reason)


class SocialGraphClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url or settings.social_graph_url
        self.timeout = timeout if timeout is not None else settings.social_graph_timeout
        self._http: Optional[httpx.AsyncClient] = None

    async def start(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._http = httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=transport
        )

    async def stop(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def fetch_following(
        self,
        user_id: str,
        bearer_token: Optional[str] = None,
    ) -> FollowingResult:
        """Return the profiles of everyone `user_id` follows (degraded-empty on failure)."""
        if self._http is None:
            raise RuntimeError("SocialGraphClient not started — call start() at startup")

        headers = {"Authorization": f"Bearer {bearer_token}"} if bearer_token else {}
        try:
            # httpx timeouts are per phase; bound the whole exchange as well
            resp = await asyncio.wait_for(
                self._http.get(f"/follow/following/{user_id}", headers=headers),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as exc:
            return self._degrade(user_id, "status", exc.response.status_code)
        except httpx.HTTPError as exc:
            return self._degrade(user_id, "transport", repr(exc))
        except asyncio.TimeoutError:
            return self._degrade(user_id, "transport", f"no response within {self.timeout}s")
        except ValueError as exc:
            return self._degrade(user_id, "malformed", exc)

        if payload is None:
            return self._degrade(user_id, "null_body", "empty response body")
        if not isinstance(payload, list):
            return self._degrade(user_id, "malformed", f"expected list, got {type(payload).__name__}")

        profiles: dict[str, AuthorProfile] = {}
        for item in payload:
            if not isinstance(item, dict) or not item.get("userId"):
                continue
            try:
                profile = AuthorProfile.model_validate(item)
            except ValidationError as exc:
                logger.debug("Skipping unreadable following entry %r: %s", item, exc)
                continue
            profiles.setdefault(profile.user_id, profile)

        return FollowingResult(profiles=profiles)

    @staticmethod
    def _degrade(user_id: str, reason: str, detail) -> FollowingResult:  # noqa: ANN001
        logger.warning(
            "Following lookup failed (user=%s, reason=%s): %s — using empty following-set",
            user_id,
            reason,
            detail,
        )
        SOCIAL_GRAPH_DEGRADED_TOTAL.labels(reason=reason).inc()
        return FollowingResult.degraded_empty(reason)


# Singleton — started/stopped in app lifespan (main.py)
social_graph_client = SocialGraphClient()
