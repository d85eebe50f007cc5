from __future__ import annotations

from typing import Protocol, Sequence

from .model import MemberExternalMapping


class MemberRepository(Protocol):
    """Read side of the member directory owned by the members CRUD layer."""

    def list_active_linked(self, brigade_id: int) -> Sequence[MemberExternalMapping]:
        """Active members of the brigade that have a DLB member id."""

        raise NotImplementedError
