"""
Requester identity.

The gateway in front of this service verifies the JWT and forwards the
caller's id in X-User-Id. The bearer token itself is kept so it can be
passed on to the social graph service.
"""
from dataclasses import dataclass

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

bearer_scheme = HTTPBearer()


@dataclass(frozen=True)
class Requester:
    user_id: str
    token: str


async def get_requester(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    x_user_id: str = Header(..., alias="X-User-Id"),
) -> Requester:
    return Requester(user_id=x_user_id, token=credentials.credentials)
