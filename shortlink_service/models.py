"""
Data model for the short-link service.

- `ShortLink` is the persisted record (one JSON object per journal line,
  one row in the `urls` table).
- `Created` / `Conflict` are the two outcomes of `BaseStorage.put`.
- `BatchItem` / `BatchResult` are the request/response pairs of the batch API.
"""

import json
import uuid
from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel


@dataclass(frozen=True)
class ShortLink:
    """A single code -> original mapping.

    `uuid` is backend bookkeeping only; lookups always go through
    `short_url` (the code) or `original_url`.
    """

    uuid: str
    short_url: str
    original_url: str

    @classmethod
    def new(cls, code: str, original: str) -> "ShortLink":
        return cls(uuid=str(uuid.uuid4()), short_url=code, original_url=original)

    def to_json(self) -> str:
        """Serialize to a single journal line (without the trailing newline)."""
        return json.dumps(
            {"uuid": self.uuid, "short_url": self.short_url, "original_url": self.original_url},
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, line: str) -> "ShortLink":
        """Parse one journal line.

        Raises:
            ValueError: If the line is not a JSON object with string
                `uuid`, `short_url` and `original_url` fields.
        """
        data = json.loads(line)
        if not isinstance(data, dict):
            raise ValueError("record is not a JSON object")
        fields = {}
        for key in ("uuid", "short_url", "original_url"):
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"missing or non-string field {key!r}")
            fields[key] = value
        return cls(**fields)


@dataclass(frozen=True)
class Created:
    """`put` stored a new record under `code`."""

    code: str


@dataclass(frozen=True)
class Conflict:
    """`put` hit a uniqueness conflict; `code` is the one already stored."""

    code: str


PutResult = Union[Created, Conflict]


class BatchItem(BaseModel):
    """One entry of a batch shorten request."""
    correlation_id: str
    original_url: str


class BatchResult(BaseModel):
    """One entry of a batch shorten response, same position as its request."""
    correlation_id: str
    short_url: str
