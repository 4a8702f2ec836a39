from userservice.domain.schemas.user import UserResponse
from userservice.infrastructure.entrypoints.cli.commands.users.output import echo_user
from userservice.infrastructure.entrypoints.cli.commands.users.output import echo_users
from userservice.infrastructure.entrypoints.cli.dependencies import get_db
from userservice.infrastructure.entrypoints.cli.dependencies import get_executor
from userservice.infrastructure.entrypoints.cli.dependencies import get_user_service


async def user_get_logic(user_id: int | None = None, username: str | None = None) -> UserResponse:
    async with get_db() as session:
        if user_id is not None:
            user = await get_user_service(session).get_user_by_id(user_id)
        elif username is not None:
            async with get_executor() as executor:
                user = await get_user_service(session, executor=executor).get_user_by_username_async(username)
        else:
            raise ValueError("Either a user ID or a username is required")

    echo_user(user)
    return user


async def user_list_logic() -> list[UserResponse]:
    async with get_db() as session:
        users = await get_user_service(session).get_all_active_users()

    echo_users(users)
    return users


async def user_search_logic(name: str) -> list[UserResponse]:
    async with get_db() as session:
        users = await get_user_service(session).search_users_by_name(name)

    echo_users(users)
    return users
