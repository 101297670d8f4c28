"""
Batch author-profile lookup used by the timestamp and distance feeds.

  POST {profile_service_url}/profiles/batch
  Body:     { "userIds": [...] }
  Response: { "profiles": [ { "userId", "name", "profilePicture" }, ... ] }

Falls back to an empty map on any error; posts then carry only their
author id in posted_by.
"""
import logging
from typing import Iterable, Optional

import httpx
from pydantic import ValidationError

from geofeed.config import settings
from geofeed.schemas import AuthorProfile
from geofeed.telemetry import PROFILE_LOOKUP_DEGRADED_TOTAL

logger = logging.getLogger(__name__)


class ProfileClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url or settings.profile_service_url
        self.timeout = timeout if timeout is not None else settings.profile_service_timeout
        self._http: Optional[httpx.AsyncClient] = None

    async def start(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._http = httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=transport
        )

    async def stop(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def fetch_profiles(self, user_ids: Iterable[str]) -> dict[str, AuthorProfile]:
        distinct = list(dict.fromkeys(user_ids))
        if not distinct:
            return {}
        if self._http is None:
            raise RuntimeError("ProfileClient not started — call start() at startup")

        try:
            resp = await self._http.post("/profiles/batch", json={"userIds": distinct})
            resp.raise_for_status()
            data = resp.json()
            raw_profiles = (data or {}).get("profiles") or []
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning(
                "Profile lookup failed for %d users: %s — continuing without profiles",
                len(distinct),
                exc,
            )
            PROFILE_LOOKUP_DEGRADED_TOTAL.inc()
            return {}

        profiles: dict[str, AuthorProfile] = {}
        for item in raw_profiles:
            if not isinstance(item, dict):
                continue
            try:
                profile = AuthorProfile.model_validate(item)
            except ValidationError:
                continue
            if profile.user_id in profiles:
                logger.warning("Duplicate profile %s in batch response; keeping first", profile.user_id)
                continue
            profiles[profile.user_id] = profile

        logger.debug("Fetched %d/%d profiles", len(profiles), len(distinct))
        return profiles


# Singleton — started/stopped in app lifespan (main.py)
profile_client = ProfileClient()
