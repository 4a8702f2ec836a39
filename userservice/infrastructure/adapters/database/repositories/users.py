from sqlalchemy import exists
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from userservice.domain.entities.user import User
from userservice.domain.exceptions import UserEmailAlreadyExistsException
from userservice.domain.exceptions import UsernameAlreadyExistsException
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.database.models import User as UserModel


class UserSQLRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(exists().where(UserModel.username == username))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(exists().where(UserModel.email == str(email)))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def get_by_id(self, user_id: int) -> User | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.session.execute(stmt)
        user_db = result.scalar_one_or_none()

        return user_db.to_entity() if user_db else None

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self.session.execute(stmt)
        user_db = result.scalar_one_or_none()

        return user_db.to_entity() if user_db else None

    async def get_active(self) -> list[User]:
        stmt = select(UserModel).where(UserModel.is_active.is_(True)).order_by(UserModel.id)
        result = await self.session.execute(stmt)

        return [user_db.to_entity() for user_db in result.scalars()]

    async def search_by_full_name(self, name: str) -> list[User]:
        stmt = select(UserModel).where(UserModel.full_name.contains(name, autoescape=True)).order_by(UserModel.id)
        result = await self.session.execute(stmt)

        # LIKE is case-insensitive on some backends (i.e SQLite), narrow it down.
        return [user_db.to_entity() for user_db in result.scalars() if name in user_db.full_name]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_active(self) -> int:
        stmt = select(func.count()).select_from(UserModel).where(UserModel.is_active.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def save(self, user: User) -> User:
        """Inserts or updates the user.

        The prior existence checks may race with a concurrent writer: the
        unique constraints of the table have the last word. Their violation is
        caught within a savepoint, so that the session stays usable, and is
        reported with the colliding field.
        """
        user_db = await self.session.get(UserModel, user.id) if user.id is not None else None

        try:
            async with self.session.begin_nested():
                if user_db is None:
                    user_db = UserModel(
                        username=user.username,
                        email=user.email,
                        full_name=user.full_name,
                        is_active=user.is_active,
                        created_at=user.created_at,
                        updated_at=user.updated_at,
                    )
                    if user.id is not None:
                        user_db.id = user.id
                    self.session.add(user_db)
                else:
                    user_db.username = user.username
                    user_db.email = user.email
                    user_db.full_name = user.full_name
                    user_db.is_active = user.is_active
                    user_db.updated_at = user.updated_at
        except IntegrityError as e:
            if await self._is_taken(UserModel.username, user.username, user.id):
                raise UsernameAlreadyExistsException(user.username) from e
            if await self._is_taken(UserModel.email, str(user.email), user.id):
                raise UserEmailAlreadyExistsException(user.email) from e
            raise

        await self.session.commit()
        await self.session.refresh(user_db)

        return user_db.to_entity()

    async def _is_taken(self, column: InstrumentedAttribute[str], value: str, user_id: int | None) -> bool:
        condition = column == value
        if user_id is not None:
            condition &= UserModel.id != user_id

        stmt = select(exists().where(condition))
        result = await self.session.execute(stmt)
        return bool(result.scalar())
