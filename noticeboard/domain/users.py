"""User records (today only the seed admin)."""
from __future__ import annotations

from typing import Optional

from .base import CamelModel


class UserUpsert(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class User(UserUpsert):
    created_at: str
    updated_at: str

    @property
    def display_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.email or "Admin"
