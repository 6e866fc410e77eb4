"""
Registry Data Model

UrlEntry is one shortened link. Instances are immutable: a visit produces
a new entry via model_copy(), so anything handed out by the registry is a
snapshot that later writes cannot change.

The short code is stored under the wire name ``short_url``, which is what
both the admin API and the store file use.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EXTRA_FRACTION_DIGITS = re.compile(r"(\.\d{6})\d+")


class UrlEntry(BaseModel):
    """
    A short code and the long URL it redirects to.

    Fields:
    - short_code: Unique key (serialized as ``short_url``)
    - long_url: Redirect target, any string
    - note: Free text set at creation
    - visit_count: Number of successful redirects
    - last_visit: UTC time of the latest redirect, None until the first one
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    short_code: str = Field(..., alias="short_url")
    long_url: str
    note: str = ""
    visit_count: int = Field(default=0, ge=0)
    last_visit: Optional[datetime] = None

    @field_validator("last_visit", mode="before")
    @classmethod
    def truncate_fraction(cls, value: Any) -> Any:
        """Cut nanosecond timestamps (e.g. '...:00.123456789Z') to microseconds."""
        if isinstance(value, str):
            return _EXTRA_FRACTION_DIGITS.sub(r"\1", value)
        return value

    @field_validator("last_visit")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def visited(self, at: datetime) -> "UrlEntry":
        """Return a copy with one more visit recorded at ``at``."""
        return self.model_copy(
            update={"visit_count": self.visit_count + 1, "last_visit": self.as_utc(at)}
        )
