from abc import ABC
from abc import abstractmethod

from userservice.domain.entities.user import User


class UserRepository(ABC):
    """A repository for managing `User` entities.

    Users are never physically deleted: deactivation is a regular `save` with
    `is_active` set to False.
    """

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Checks whether a user already holds the given username.

        Args:
            username: The username to look for (exact match).

        Returns:
            True if a user exists with that username, False otherwise.
        """
        ...

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Checks whether a user already holds the given email address.

        Args:
            email: The email address to look for (exact match).

        Returns:
            True if a user exists with that email, False otherwise.
        """
        ...

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieves a user by their unique ID.

        Args:
            user_id: The ID of the user to retrieve.

        Returns:
            The `User` entity if found, otherwise None.
        """
        ...

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        """Retrieves a user by their unique username.

        Args:
            username: The username of the user to retrieve.

        Returns:
            The `User` entity if found, otherwise None.
        """
        ...

    @abstractmethod
    async def get_active(self) -> list[User]:
        """Retrieves all the active users, ordered by ID.

        Returns:
            A list of `User` entities whose `is_active` flag is True.
        """
        ...

    @abstractmethod
    async def search_by_full_name(self, name: str) -> list[User]:
        """Retrieves the users whose full name contains the given fragment.

        The match is a case-sensitive substring test, ordered by ID.

        Args:
            name: The fragment to look for in the full names.

        Returns:
            A list of matching `User` entities, active or not.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Counts all the users, active or not."""
        ...

    @abstractmethod
    async def count_active(self) -> int:
        """Counts the active users only."""
        ...

    @abstractmethod
    async def save(self, user: User) -> User:
        """Inserts or updates a user.

        A user without ID is inserted, otherwise the row holding that ID is
        updated with the entity's values.

        Args:
            user: The `User` entity to persist.

        Returns:
            The persisted `User` entity, with its ID populated.
        """
        ...
