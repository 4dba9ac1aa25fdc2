"""
HTTP Basic authentication against a plaintext keys file.

The keys file holds one ``user:password`` entry per line. When no keys file
is configured every request is allowed.
"""
import base64
import binascii
import logging
import secrets
from pathlib import Path
from typing import Iterable, Optional, Tuple

from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param

from ..zpool.core.exceptions.exporter_exceptions import AuthConfigError

logger = logging.getLogger(__name__)

WWW_AUTHENTICATE_HEADERS = {"WWW-Authenticate": "Basic"}


class BasicAuthRules:
    """Accepted ``user:password`` entries."""

    def __init__(self, entries: Tuple[str, ...]):
        self._entries = tuple(sorted(entries))

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> Optional['BasicAuthRules']:
        """Build rules from entries kept verbatim; blank lines are skipped.

        Returns None when there are no entries.
        """
        kept = tuple(entry for entry in entries if entry.strip())
        if not kept:
            return None
        return cls(kept)

    @classmethod
    def from_file(cls, path: str) -> 'BasicAuthRules':
        """
        Load rules from a keys file.

        Raises:
            AuthConfigError: file unreadable or without entries
        """
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise AuthConfigError(path, str(e))
        rules = cls.from_entries(content.splitlines())
        if rules is None:
            raise AuthConfigError(path, "no entries")
        logger.info(f"Loaded {len(rules)} basic auth entries from {path}")
        logger.warning(
            "HTTP transmits authentication in plaintext, "
            "use a HTTPS proxy on the local machine"
        )
        return rules

    def is_allowed(self, credentials: str) -> bool:
        """Check decoded ``user:password`` against every entry in constant time."""
        candidate = credentials.encode("utf-8")
        allowed = False
        for entry in self._entries:
            if secrets.compare_digest(candidate, entry.encode("utf-8")):
                allowed = True
        return allowed


def decode_basic_credentials(authorization: str) -> Optional[str]:
    """Return the decoded ``user:password`` of a Basic header, or None if malformed."""
    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    if ":" not in decoded:
        return None
    return decoded


async def require_basic_auth(request: Request) -> None:
    """
    Dependency enforcing the configured basic auth rules.

    Raises:
        HTTPException: 401 without credentials, 403 with wrong ones
    """
    rules: Optional[BasicAuthRules] = getattr(request.app.state, "auth_rules", None)
    if rules is None:
        return

    authorization = request.headers.get("Authorization")
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers=WWW_AUTHENTICATE_HEADERS,
        )

    credentials = decode_basic_credentials(authorization)
    if credentials is None or not rules.is_allowed(credentials):
        logger.warning(f"Rejected credentials for {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
