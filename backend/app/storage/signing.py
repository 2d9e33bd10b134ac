"""Time-limited signed download URLs for stored objects."""

import hashlib
import hmac
import time
from dataclasses import dataclass
from urllib.parse import quote, urlencode


class SignatureInvalidError(Exception):
    """Signature does not match the path and expiry."""

    pass


class SignatureExpiredError(Exception):
    """Signed URL is past its expiry."""

    pass


@dataclass(frozen=True)
class SignedUrl:
    """Relative download URL plus its absolute expiry (unix seconds)."""

    url: str
    expires_at: int


class UrlSigner:
    """HMAC-SHA256 signer for ``/files/{path}`` URLs."""

    def __init__(self, secret: str, ttl_seconds: int = 60) -> None:
        self._secret = secret.encode()
        self._ttl_seconds = ttl_seconds

    def _digest(self, path: str, expires_at: int) -> str:
        message = f"{path}:{expires_at}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def sign(self, path: str, now: float | None = None) -> SignedUrl:
        """Build a URL valid for the configured TTL."""
        if now is None:
            now = time.time()
        expires_at = int(now) + self._ttl_seconds
        query = urlencode({"expires": expires_at, "signature": self._digest(path, expires_at)})
        return SignedUrl(url=f"/files/{quote(path)}?{query}", expires_at=expires_at)

    def verify(self, path: str, expires_at: int, signature: str, now: float | None = None) -> None:
        """Check a signed URL's parameters.

        Raises:
            SignatureInvalidError: If the signature was not produced for this path/expiry.
            SignatureExpiredError: If the URL has expired.
        """
        expected = self._digest(path, expires_at)
        if not hmac.compare_digest(expected, signature):
            raise SignatureInvalidError("Invalid signature")

        if now is None:
            now = time.time()
        if now > expires_at:
            raise SignatureExpiredError("Signed URL expired")
