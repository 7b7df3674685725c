"""
division_cms.auth.models

Auth domain models.

Responsibilities:
- Define the decoded admin token payload (`AdminPrincipal`) and its wire schema.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class AdminTokenPayload(BaseModel):
    """Wire shape of the base64 payload segment; `exp` is epoch milliseconds.

    JavaScript issuers may emit `exp` as a fractional number, so both are accepted.
    """

    model_config = ConfigDict(extra="ignore")

    admin_id: uuid.UUID
    user_id: str
    division_id: uuid.UUID
    exp: int | float


@dataclass(frozen=True, slots=True)
class AdminPrincipal:
    """
    Identity claimed by a verified admin token.
    """

    admin_id: uuid.UUID
    user_id: str
    division_id: uuid.UUID
    expiry_timestamp: int | float

    @classmethod
    def from_payload(cls, payload: AdminTokenPayload) -> AdminPrincipal:
        return cls(
            admin_id=payload.admin_id,
            user_id=payload.user_id,
            division_id=payload.division_id,
            expiry_timestamp=payload.exp,
        )

    def to_payload(self) -> AdminTokenPayload:
        return AdminTokenPayload(
            admin_id=self.admin_id,
            user_id=self.user_id,
            division_id=self.division_id,
            exp=self.expiry_timestamp,
        )


# --- Module Notes -----------------------------------------------------------
# `division_id` here is informational only; authorization reads the admin row.
