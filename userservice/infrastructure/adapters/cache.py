import time
from collections import OrderedDict

from userservice.domain.ports.cache import UserCachePort
from userservice.domain.schemas.user import UserResponse


class InMemoryUserCache(UserCachePort):
    """An in-process implementation of the `UserCachePort`.

    Entries expire `ttl` seconds after being set, and the least recently used
    entry is evicted once `max_size` entries are held. Since all the callers
    share one event loop, no locking is involved.
    """

    def __init__(self, max_size: int = 1024, ttl: float = 600.0) -> None:
        self.max_size = max_size
        self.ttl = ttl
        self._entries: OrderedDict[int, tuple[UserResponse, float]] = OrderedDict()

        # Invalidation clock: the generation of an ID is the last tick at which
        # it was deleted, or the whole cache cleared.
        self._clock = 0
        self._deleted_at: dict[int, int] = {}
        self._cleared_at = 0

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, user_id: int) -> UserResponse | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None

        user, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[user_id]
            return None

        self._entries.move_to_end(user_id)
        return user

    async def get_generation(self, user_id: int) -> int:
        return max(self._deleted_at.get(user_id, 0), self._cleared_at)

    async def set(self, user: UserResponse, generation: int | None = None) -> None:
        if generation is not None and generation != await self.get_generation(user.id):
            return

        self._entries[user.id] = (user, time.monotonic() + self.ttl)
        self._entries.move_to_end(user.id)

        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    async def delete(self, user_id: int) -> None:
        self._entries.pop(user_id, None)

        self._clock += 1
        self._deleted_at[user_id] = self._clock

    async def clear(self) -> None:
        self._entries.clear()

        self._clock += 1
        self._cleared_at = self._clock
        self._deleted_at.clear()
