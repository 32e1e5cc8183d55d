# models/timestamp.py

import time
from datetime import datetime, timezone

from pydantic import model_validator

from models.base import DocumentModel


class Timestamp(DocumentModel):
    """
    Wire-level timestamp stored on every document:
        {"seconds": 1640995200, "nanoseconds": 0}
    """
    seconds: int
    nanoseconds: int = 0

    # Accept ISO strings / datetimes written by older rows or by Postgres
    @model_validator(mode="before")
    @classmethod
    def normalize(cls, v):
        if isinstance(v, str):
            if v.endswith("Z"):
                v = v.replace("Z", "+00:00")
            v = datetime.fromisoformat(v)
        if isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            return {"seconds": int(v.timestamp()), "nanoseconds": v.microsecond * 1000}
        return v

    @classmethod
    def now(cls) -> "Timestamp":
        ns = time.time_ns()
        return cls(seconds=ns // 1_000_000_000, nanoseconds=ns % 1_000_000_000)

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(
            self.seconds + self.nanoseconds / 1_000_000_000, tz=timezone.utc
        )
