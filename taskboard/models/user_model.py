from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from taskboard.utils.db import isoformat, utc_now


@dataclass
class User:
    username: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["_id"]),
            username=doc["username"],
            email=doc["email"],
            password_hash=doc["passwordHash"],
            created_at=doc["createdAt"],
            updated_at=doc["updatedAt"],
        )

    def to_dict(self):
        # passwordHash never leaves the server
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
