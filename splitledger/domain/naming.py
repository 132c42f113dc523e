"""Human-readable labels for transactions, and the name cache capability"""

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Protocol

from splitledger.domain.models import ParticipantId

DisplayName = Callable[[ParticipantId], Optional[str]]

DEFAULT_NAME_TTL_SECONDS = 300.0  # 5 minutes


def describe_transaction(
    from_participant: ParticipantId,
    to_participant: ParticipantId,
    amount: Decimal,
    *,
    perspective: Optional[ParticipantId] = None,
    display_name: Optional[DisplayName] = None,
) -> str:
    """
    Label a transfer for humans.

    Examples:
        "alice.eth pays 0xabc... 12.500000"
        "You pay alice.eth 12.500000"   (perspective == sender)
        "alice.eth pays you 12.500000"  (perspective == receiver)
    """

    def label(participant: ParticipantId, *, subject: bool) -> str:
        if perspective is not None and participant == perspective:
            return "You" if subject else "you"
        if display_name is not None:
            name = display_name(participant)
            if name:
                return name
        return participant

    verb = "pay" if perspective is not None and from_participant == perspective else "pays"
    return f"{label(from_participant, subject=True)} {verb} {label(to_participant, subject=False)} {amount}"


@dataclass
class CachedName:
    """Cached lookup result; name=None records a confirmed miss"""

    name: Optional[str]
    expires_at: float


class NameCache(Protocol):
    """Get/put contract for a name-resolution cache with expiry"""

    def get(self, key: str, now: float) -> Optional[CachedName]:
        ...

    def put(self, key: str, name: Optional[str], expires_at: float) -> None:
        ...


class InMemoryNameCache:
    """Dict-backed NameCache; expired entries are evicted on read"""

    def __init__(self):
        self._entries: Dict[str, CachedName] = {}

    def get(self, key: str, now: float) -> Optional[CachedName]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= now:
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, name: Optional[str], expires_at: float) -> None:
        self._entries[key] = CachedName(name=name, expires_at=expires_at)

    def __len__(self) -> int:
        return len(self._entries)


class CachedNameResolver:
    """
    DisplayName callable that consults a NameCache before the real resolver.

    Both hits and misses are cached for ttl_seconds, so an unknown address
    does not trigger a lookup on every render.
    """

    def __init__(
        self,
        resolve: DisplayName,
        cache: NameCache,
        ttl_seconds: float = DEFAULT_NAME_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.resolve = resolve
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def __call__(self, participant: ParticipantId) -> Optional[str]:
        now = self.clock()
        cached = self.cache.get(participant, now)
        if cached is not None:
            return cached.name

        name = self.resolve(participant)
        self.cache.put(participant, name, now + self.ttl_seconds)
        return name
