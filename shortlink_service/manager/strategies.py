"""
Short-code generation for shortlink_service.

Provided strategy:
- SHA1Base64Strategy: SHA-1(raw bytes of the URL) -> URL-safe Base64 -> first L chars (L=8)

Notes:
- The strategy is stateless and deterministic: the same input always maps to
  the same code. Storage backends rely on this to detect a resubmitted URL
  purely from a uniqueness conflict, without a read-before-write.
- Truncation means two different URLs can share a code. That case is handled
  as an ordinary conflict by the backends, exactly like a resubmission.
"""

import base64
import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

CODE_LENGTH = 8


class BaseStrategy(ABC):
    """Abstract base for code generation strategies."""

    @abstractmethod
    def generate(self, url: str) -> str:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class SHA1Base64Strategy(BaseStrategy):
    """Deterministic SHA-1 -> URL-safe Base64 -> truncate strategy."""

    length: int = CODE_LENGTH

    def generate(self, url: str) -> str:
        digest = hashlib.sha1(url.encode("utf-8")).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii")[: self.length]


_default_strategy = SHA1Base64Strategy()


def generate_code(original: str) -> str:
    """
    Facade used by the rest of the app.

    >>> generate_code("https://rcimbvs.com/iuymedy")
    '-8eOIgoJ'
    """
    return _default_strategy.generate(original)
