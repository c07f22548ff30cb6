"""
Time-bounded signed tokens.

Tokens are compact HS256 JSON Web Tokens carrying only the standard time
claims (iat, nbf, exp). They are not bound to any task: possession of a
fresh token signed with the process key is the whole credential.
"""

import base64
import binascii
import hashlib
import hmac
import json
import re
import secrets
import time
from collections.abc import Callable

from taskapi.config import settings
from taskapi.exceptions import AuthError, SigningError

KEY_BYTES = 32
HEADER = {"alg": "HS256", "typ": "JWT"}

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def generate_key() -> bytes:
    """Generate a random 256-bit HMAC key."""
    return secrets.token_bytes(KEY_BYTES)


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    if not _SEGMENT_RE.match(segment):
        raise AuthError("invalid token")
    try:
        return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError):
        raise AuthError("invalid token")


def _encode_json(value: dict) -> str:
    return b64url_encode(json.dumps(value, separators=(",", ":"), sort_keys=True).encode())


class TokenAuthority:
    """Mints and verifies tokens with a single key held for the process lifetime."""

    def __init__(
        self,
        key: bytes | None = None,
        ttl_seconds: int | None = None,
        leeway_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._key = key if key is not None else generate_key()
        self.ttl_seconds = settings.token_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.leeway_seconds = (
            settings.token_leeway_seconds if leeway_seconds is None else leeway_seconds
        )
        self._clock = clock

    def _sign(self, signing_input: str) -> bytes:
        return hmac.new(self._key, signing_input.encode("ascii"), hashlib.sha256).digest()

    def issue(self) -> str:
        """Create a token valid from now until now + ttl_seconds."""
        try:
            now = int(self._clock())
            claims = {"iat": now, "nbf": now, "exp": now + self.ttl_seconds}
            signing_input = f"{_encode_json(HEADER)}.{_encode_json(claims)}"
            signature = self._sign(signing_input)
        except (TypeError, ValueError) as e:
            raise SigningError(str(e)) from e
        return f"{signing_input}.{b64url_encode(signature)}"

    def verify(self, token: str) -> None:
        """
        Check signature and validity window.

        Raises AuthError for malformed, tampered, expired or not-yet-valid tokens.
        The message never says which check failed.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise AuthError("invalid token")
        if not all(_SEGMENT_RE.match(part) for part in parts):
            raise AuthError("invalid token")
        header_segment, claims_segment, signature_segment = parts

        signature = b64url_decode(signature_segment)
        expected = self._sign(f"{header_segment}.{claims_segment}")
        if not hmac.compare_digest(signature, expected):
            raise AuthError("invalid token")

        try:
            header = json.loads(b64url_decode(header_segment))
            claims = json.loads(b64url_decode(claims_segment))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise AuthError("invalid token")

        if not isinstance(header, dict) or header.get("alg") != HEADER["alg"]:
            raise AuthError("invalid token")
        if not isinstance(claims, dict):
            raise AuthError("invalid token")

        exp = claims.get("exp")
        nbf = claims.get("nbf", claims.get("iat"))
        if not isinstance(exp, int | float) or isinstance(exp, bool):
            raise AuthError("invalid token")

        now = self._clock()
        if now > exp + self.leeway_seconds:
            raise AuthError("invalid token")
        if isinstance(nbf, int | float) and now < nbf - self.leeway_seconds:
            raise AuthError("invalid token")
