"""
Persisted Credential Store
==========================

Keeps the session token, user id and role between runs.

Stored in ~/.academix/credentials.json (mode 0600):

    {
      "token": "<jwt>",
      "user_id": "...",
      "user_role": "super_admin",
      "refresh_token": null
    }
"""

import os
import json
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import aiofiles
from jose import jwt, JWTError

from academix_admin.logging_config import get_logger


logger = get_logger("token_store")

# Demo tokens issued by the backend's seed data; they carry no exp claim
STATIC_TOKEN_CLAIMS = {
    "static_admin_token": {"sub": "admin", "role": "super_admin", "exp": 9999999999},
    "static_college_token": {"sub": "college", "role": "college_admin", "exp": 9999999999},
}


class CredentialStore:
    """
    Reads and writes the credential file.

    Every method that touches the file is a coroutine; nothing is cached in
    memory so two stores pointed at the same path agree.
    """

    TOKEN_KEY = "token"
    USER_ID_KEY = "user_id"
    USER_ROLE_KEY = "user_role"
    REFRESH_TOKEN_KEY = "refresh_token"

    def __init__(self, path: str):
        self.path = Path(path)

    async def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            async with aiofiles.open(self.path, "r") as f:
                content = await f.read()
            data = json.loads(content) if content.strip() else {}
            return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read credentials from {self.path}: {e}")
            return {}

    async def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w") as f:
            await f.write(json.dumps(data, indent=2))
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            # Not supported on every platform (e.g. some Windows filesystems)
            logger.debug("Could not restrict credential file permissions")

    async def save_token(
        self,
        token: str,
        user_id: Optional[str] = None,
        user_role: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> bool:
        """Persist the token; optional fields are only written when given"""
        try:
            data = await self._read()
            data[self.TOKEN_KEY] = token
            if user_id is not None:
                data[self.USER_ID_KEY] = str(user_id)
            if user_role is not None:
                data[self.USER_ROLE_KEY] = user_role
            if refresh_token is not None:
                data[self.REFRESH_TOKEN_KEY] = refresh_token
            await self._write(data)
            logger.info("Token saved successfully")
            return True
        except OSError as e:
            logger.error(f"Error saving token: {e}")
            return False

    async def get_token(self) -> Optional[str]:
        return (await self._read()).get(self.TOKEN_KEY)

    async def get_user_id(self) -> Optional[str]:
        return (await self._read()).get(self.USER_ID_KEY)

    async def get_user_role(self) -> Optional[str]:
        return (await self._read()).get(self.USER_ROLE_KEY)

    async def get_refresh_token(self) -> Optional[str]:
        return (await self._read()).get(self.REFRESH_TOKEN_KEY)

    async def delete_token(self) -> bool:
        """Remove every stored credential"""
        try:
            if self.path.exists():
                self.path.unlink()
            return True
        except OSError as e:
            logger.error(f"Error deleting credentials: {e}")
            return False

    async def has_token(self) -> bool:
        token = await self.get_token()
        return bool(token)

    async def is_authenticated(self) -> bool:
        """A non-empty token that has not expired"""
        token = await self.get_token()
        return bool(token) and self.is_token_valid(token)

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Read the token claims without verifying the signature.

        The backend is the only party that can verify; the client only needs
        the role and expiry for local decisions.
        """
        for marker, claims in STATIC_TOKEN_CLAIMS.items():
            if marker in token:
                return dict(claims)
        try:
            return jwt.get_unverified_claims(token)
        except JWTError as e:
            logger.debug(f"Error decoding token: {e}")
            return None

    def get_expiry(self, token: str) -> Optional[datetime]:
        claims = self.decode_token(token)
        if not claims or "exp" not in claims:
            return None
        try:
            return datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None

    def is_token_valid(self, token: str) -> bool:
        """Static demo tokens are always valid; JWTs must decode and not be expired"""
        if any(marker in token for marker in STATIC_TOKEN_CLAIMS):
            return True
        claims = self.decode_token(token)
        if claims is None:
            return False
        expiry = self.get_expiry(token)
        if expiry is None:
            # No exp claim: the backend decides
            return True
        return datetime.now(timezone.utc) < expiry

    async def will_expire_soon(self, minutes: int = 5) -> bool:
        """True when no token is stored or it expires within `minutes`"""
        token = await self.get_token()
        if not token:
            return True
        if any(marker in token for marker in STATIC_TOKEN_CLAIMS):
            return False
        if self.decode_token(token) is None:
            return True
        expiry = self.get_expiry(token)
        if expiry is None:
            return False
        return expiry <= datetime.now(timezone.utc) + timedelta(minutes=minutes)
