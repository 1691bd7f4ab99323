"""Value objects for session authentication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Principal:
    sub: str  # session subject (user ID)
    email: Optional[str]
    exp: Optional[datetime] = None

    def matches_identity(self, allowed: str) -> bool:
        """Compare the principal's email with a configured identity."""
        if not self.email or not allowed:
            return False
        return self.email.strip().lower() == allowed.strip().lower()
