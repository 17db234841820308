# src/taskpad/auth/user_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class User:
    id: str
    name: str
    email: str
    password: str  # encoded by the active CredentialCodec, never returned
    created_at: str

    def to_record(self) -> dict[str, Any]:
        """Store representation (includes the encoded credential)."""
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "createdAt": self.created_at,
        }

    def to_public(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> User:
        return cls(
            id=str(rec.get("_id") or ""),
            name=str(rec.get("name") or ""),
            email=str(rec.get("email") or ""),
            password=str(rec.get("password") or ""),
            created_at=str(rec.get("createdAt") or ""),
        )
