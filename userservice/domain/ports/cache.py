from abc import ABC
from abc import abstractmethod

from userservice.domain.schemas.user import UserResponse


class UserCachePort(ABC):
    """Interface for caching user views by ID.

    The cache is a transparent optimization: a miss must always be answered by
    the store, and any mutation must evict the stale entry.

    A read populating the cache may be interleaved with a mutation. To avoid
    caching the view read before it, readers take the entry's generation
    before reading the store and hand it back to `set`, which drops the view
    if the entry has been invalidated in between.
    """

    @abstractmethod
    async def get(self, user_id: int) -> UserResponse | None:
        pass

    @abstractmethod
    async def get_generation(self, user_id: int) -> int:
        """Returns a number bumped on each invalidation of the user's entry."""
        pass

    @abstractmethod
    async def set(self, user: UserResponse, generation: int | None = None) -> None:
        """Caches the user's view.

        Args:
            user: The view to cache.
            generation: The generation taken before reading the view. When it
                is outdated, the view is dropped.
        """
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass
