from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool

from nextclass.core.firebase import verify_id_token

# auto_error=False so a missing header yields 401 rather than FastAPI's default 403.
security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
  """Authenticated teacher identity taken from a verified ID token."""

  uid: str
  email: str | None = None


async def get_current_principal(token: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)]) -> Principal:
  """Verify the Firebase ID token on the request and return the caller."""
  if token is None or not token.credentials:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authentication credentials", headers={"WWW-Authenticate": "Bearer"})

  decoded_claims = await run_in_threadpool(verify_id_token, token.credentials)
  if not decoded_claims:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials", headers={"WWW-Authenticate": "Bearer"})

  firebase_uid = decoded_claims.get("uid")
  if not firebase_uid:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token claims")

  email = decoded_claims.get("email")
  return Principal(uid=str(firebase_uid), email=str(email) if email else None)
