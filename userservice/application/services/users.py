import asyncio
import dataclasses
import logging
from datetime import UTC
from datetime import datetime

from userservice.application.services.metrics import record_user_operation
from userservice.domain.entities.user import User
from userservice.domain.exceptions import UserEmailAlreadyExistsException
from userservice.domain.exceptions import UsernameAlreadyExistsException
from userservice.domain.exceptions import UserNotFound
from userservice.domain.ports.cache import UserCachePort
from userservice.domain.ports.executor import TaskExecutorPort
from userservice.domain.ports.metrics import UserMetricsPort
from userservice.domain.ports.repositories.users import UserRepository
from userservice.domain.schemas.user import UserCreate
from userservice.domain.schemas.user import UserResponse
from userservice.domain.schemas.user import UserUpdate
from userservice.domain.types import UserOperation

logger = logging.getLogger(__name__)


class UserService:
    """
    Orchestrates the user operations: validation of the uniqueness constraints,
    construction or mutation of the entities, then persistence through the
    repository.

    Mutations are measured with the metrics port, lookups by ID go through the
    optional cache and the asynchronous lookup is delegated to the executor.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        metrics: UserMetricsPort,
        executor: TaskExecutorPort | None = None,
        cache: UserCachePort | None = None,
    ) -> None:
        self.user_repository = user_repository
        self.metrics = metrics
        self.executor = executor
        self.cache = cache

    @record_user_operation(UserOperation.CREATE)
    async def create_user(self, user_data: UserCreate) -> UserResponse:
        """Creates a new active user.

        Args:
            user_data: The data for the new user.

        Returns:
            The view of the newly created user.

        Raises:
            UsernameAlreadyExistsException: If the username is already taken.
            UserEmailAlreadyExistsException: If the email is already registered.
        """
        if await self.user_repository.exists_by_username(user_data.username):
            raise UsernameAlreadyExistsException(user_data.username)

        if await self.user_repository.exists_by_email(user_data.email):
            raise UserEmailAlreadyExistsException(user_data.email)

        now = datetime.now(UTC)
        user = User(
            username=user_data.username,
            email=user_data.email,
            full_name=user_data.full_name,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        user = await self.user_repository.save(user)

        logger.info(f"User {user.username} created with ID {user.id}")
        return UserResponse.model_validate(user)

    async def get_user_by_id(self, user_id: int) -> UserResponse:
        generation = None
        if self.cache is not None:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return cached
            generation = await self.cache.get_generation(user_id)

        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)

        response = UserResponse.model_validate(user)
        if self.cache is not None:
            # Dropped if a mutation evicted the user while it was being read.
            await self.cache.set(response, generation=generation)

        return response

    async def get_user_by_username(self, username: str) -> UserResponse:
        user = await self.user_repository.get_by_username(username)
        if user is None:
            raise UserNotFound(username, lookup="username")

        return UserResponse.model_validate(user)

    def get_user_by_username_async(self, username: str) -> asyncio.Future[UserResponse]:
        """Looks a user up by username on a worker of the executor.

        Args:
            username: The username of the user to retrieve.

        Returns:
            A future resolved with the user's view, or failed with `UserNotFound`.

        Raises:
            TaskRejectedError: If the executor is saturated.
        """
        if self.executor is None:
            raise RuntimeError("No executor configured for asynchronous lookups")

        return self.executor.submit(self.get_user_by_username, username)

    async def get_all_active_users(self) -> list[UserResponse]:
        users = await self.user_repository.get_active()
        return [UserResponse.model_validate(user) for user in users]

    async def search_users_by_name(self, name: str) -> list[UserResponse]:
        users = await self.user_repository.search_by_full_name(name)
        return [UserResponse.model_validate(user) for user in users]

    @record_user_operation(UserOperation.UPDATE)
    async def update_user(self, user_id: int, user_data: UserUpdate) -> UserResponse:
        """Updates an existing user with the fields provided.

        The username and email are checked against the other users only when
        they are changed.

        Args:
            user_id: The ID of the user to update.
            user_data: The fields to update.

        Returns:
            The view of the updated user.

        Raises:
            UserNotFound: If no user exists with that ID.
            UsernameAlreadyExistsException: If the new username is already taken.
            UserEmailAlreadyExistsException: If the new email is already registered.
        """
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)

        changes = user_data.model_dump(exclude_unset=True)

        username = changes.get("username")
        if username is not None and username != user.username:
            if await self.user_repository.exists_by_username(username):
                raise UsernameAlreadyExistsException(username)

        email = changes.get("email")
        if email is not None and email != user.email:
            if await self.user_repository.exists_by_email(email):
                raise UserEmailAlreadyExistsException(email)

        user = await self.user_repository.save(
            dataclasses.replace(user, **changes, updated_at=datetime.now(UTC)),
        )
        await self._evict(user_id)

        logger.info(f"User {user_id} updated: {', '.join(changes)}")
        return UserResponse.model_validate(user)

    @record_user_operation(UserOperation.DEACTIVATE)
    async def deactivate_user(self, user_id: int) -> None:
        """Deactivates a user (soft delete): the record is kept but marked inactive.

        Args:
            user_id: The ID of the user to deactivate.

        Raises:
            UserNotFound: If no user exists with that ID.
        """
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)

        await self.user_repository.save(
            dataclasses.replace(user, is_active=False, updated_at=datetime.now(UTC)),
        )
        await self._evict(user_id)

        logger.info(f"User {user_id} deactivated")

    async def _evict(self, user_id: int) -> None:
        if self.cache is not None:
            await self.cache.delete(user_id)
