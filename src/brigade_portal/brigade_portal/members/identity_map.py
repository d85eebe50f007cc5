from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..common.validators import strict_int
from ..core.exceptions import NotMapped
from .model import MemberExternalMapping
from .repository import MemberRepository

logger = logging.getLogger(__name__)


class MemberIdentityMap:
    """Snapshot of DLB member id <-> local member id for one sync invocation."""

    def __init__(self, mappings: Iterable[MemberExternalMapping]):
        by_external: dict[int, int] = {}
        ambiguous: set[int] = set()
        for m in mappings:
            if not m.active:
                continue
            ext = int(m.external_member_id)
            if ext in by_external and by_external[ext] != int(m.local_member_id):
                ambiguous.add(ext)
                continue
            by_external[ext] = int(m.local_member_id)

        for ext in sorted(ambiguous):
            logger.warning(f"DLB member {ext} is linked to more than one active member; leaving it unmapped")
            del by_external[ext]

        self._by_external = by_external
        self._by_local = {local: ext for ext, local in by_external.items()}

    def resolve(self, external_id: Any) -> int:
        try:
            key = strict_int(external_id)
        except (TypeError, ValueError):
            raise NotMapped(external_id) from None
        local_id = self._by_external.get(key)
        if local_id is None:
            raise NotMapped(external_id)
        return local_id

    def local_to_external(self, local_member_id: int) -> Optional[int]:
        return self._by_local.get(int(local_member_id))

    def as_dict(self) -> Mapping[int, int]:
        return dict(self._by_external)

    def __len__(self) -> int:
        return len(self._by_external)

    def __contains__(self, external_id: object) -> bool:
        try:
            self.resolve(external_id)
        except NotMapped:
            return False
        return True


class MemberDirectory:
    """Builds identity maps from the member directory.

    Never cached: membership changes take effect on the next invocation.
    """

    def __init__(self, members: MemberRepository):
        self._members = members

    def map_of(self, brigade_id: int) -> MemberIdentityMap:
        return MemberIdentityMap(self._members.list_active_linked(int(brigade_id)))
