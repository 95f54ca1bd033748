# dependencies.py
"""
Shared FastAPI dependencies: bearer token verification.
"""
import logging

from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt

import config

logger = logging.getLogger(__name__)


def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
     except JWTError:
          logger.warning("Rejected invalid bearer token for %s %s", request.method, request.url.path)
          raise HTTPException(status_code=403, detail="Invalid token")


def get_current_user_id(token: dict = Depends(verify_token)) -> int:
     """ID of the authenticated user (the ``id`` claim)."""
     user_id = token.get("id")
     if user_id is None:
          raise HTTPException(status_code=403, detail="Token has no user id")
     try:
          return int(user_id)
     except (TypeError, ValueError):
          raise HTTPException(status_code=403, detail="Token has an invalid user id")
