"""Reference to the user acting on a request.

Authentication happens outside the domain; the domain only records who
did what.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import UnauthenticatedError


@dataclass(frozen=True)
class UserRef:

    user_id: str
    display_name: str | None = None

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise UnauthenticatedError("An acting user is required")

    def __str__(self) -> str:
        return self.display_name or self.user_id
