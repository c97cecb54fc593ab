"""SQLAlchemyUserRepository - SQLAlchemy implementation of UserRepository.

Adapter for hexagonal architecture. Maps between the domain User aggregate
(with its sessions) and the auth_users / auth_sessions tables.

Optimistic concurrency:
    Updates are issued as ``UPDATE ... WHERE id = :id AND version = :version``.
    Zero matched rows means another writer got there first and the save
    returns a retryable ConflictError.
"""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import ConflictError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.session import Session
from school_auth.domain.entities.user import User
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.email import EmailAddress
from school_auth.infrastructure.persistence.models.session import SessionModel
from school_auth.infrastructure.persistence.models.user import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of the UserRepository protocol.

    This class does NOT inherit from UserRepository (Protocol uses structural
    typing).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = SQLAlchemyUserRepository(session)
        ...     user = await repo.find_by_email("user@school.edu")
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        return await self._find_one(stmt)

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address.

        Emails are stored normalized (lowercase), so the lookup lowercases
        the input instead of pattern matching.
        """
        stmt = select(UserModel).where(UserModel.email == _normalize_email(email))
        return await self._find_one(stmt)

    async def find_by_refresh_token(self, refresh_token: str) -> User | None:
        if not refresh_token:
            return None
        stmt = select(UserModel).where(UserModel.refresh_token == refresh_token)
        return await self._find_one(stmt)

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == _normalize_email(email))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert or update the user and its sessions in one transaction.

        Returns:
            Success(None) and bumps ``user.version`` when written.
            Failure(ConflictError) on stale version or duplicate email.
        """
        try:
            if user.version == 0:
                self.session.add(self._to_model(user, version=1))
            else:
                stmt = (
                    update(UserModel)
                    .where(UserModel.id == user.id, UserModel.version == user.version)
                    .values(**self._user_values(user), version=user.version + 1)
                    .execution_options(synchronize_session=False)
                )
                result = await self.session.execute(stmt)
                if result.rowcount == 0:
                    await self.session.rollback()
                    return Failure(error=_stale_write(user.id))
                for session in user.sessions:
                    await self.session.merge(self._session_to_model(session))

            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if user.version == 0 and await self._id_exists(user.id):
                return Failure(error=_stale_write(user.id))
            return Failure(
                error=ConflictError(
                    code=ErrorCode.EMAIL_ALREADY_EXISTS,
                    message="Email address is already registered",
                    resource_type="User",
                    conflicting_field="email",
                )
            )

        user.version += 1
        return Success(value=None)

    async def _find_one(self, stmt) -> User | None:  # type: ignore[no-untyped-def]
        result = await self.session.execute(
            stmt.execution_options(populate_existing=True)
        )
        user_model = result.scalar_one_or_none()
        if user_model is None:
            return None
        return self._to_domain(user_model)

    async def _id_exists(self, user_id: UUID) -> bool:
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none() is not None

    def _to_domain(self, user_model: UserModel) -> User:
        """Convert database model to domain aggregate."""
        return User(
            id=user_model.id,
            first_name=user_model.first_name,
            last_name=user_model.last_name,
            email=EmailAddress(user_model.email),
            credential=Credential(
                password_hash=user_model.password_hash,
                changed_at=user_model.password_changed_at,
            ),
            role=UserRole.from_code(user_model.role),
            school_id=user_model.school_id,
            is_active=user_model.is_active,
            email_confirmed=user_model.email_confirmed,
            failed_login_count=user_model.failed_login_count,
            locked_until=user_model.locked_until,
            refresh_token=user_model.refresh_token,
            refresh_token_expires_at=user_model.refresh_token_expires_at,
            last_login_at=user_model.last_login_at,
            created_at=user_model.created_at,
            updated_at=user_model.updated_at,
            version=user_model.version,
            sessions=[self._session_to_domain(s) for s in user_model.sessions],
        )

    def _to_model(self, user: User, *, version: int) -> UserModel:
        """Convert domain aggregate to a new database model."""
        model = UserModel(
            id=user.id,
            created_at=user.created_at,
            version=version,
            **self._user_values(user),
        )
        model.sessions = [self._session_to_model(s) for s in user.sessions]
        return model

    @staticmethod
    def _user_values(user: User) -> dict[str, object]:
        return {
            "email": str(user.email),
            "first_name": user.first_name,
            "last_name": user.last_name,
            "password_hash": user.credential.password_hash,
            "password_changed_at": user.credential.changed_at,
            "role": user.role.value,
            "school_id": user.school_id,
            "is_active": user.is_active,
            "email_confirmed": user.email_confirmed,
            "failed_login_count": user.failed_login_count,
            "locked_until": user.locked_until,
            "refresh_token": user.refresh_token,
            "refresh_token_expires_at": user.refresh_token_expires_at,
            "last_login_at": user.last_login_at,
            "updated_at": user.updated_at,
        }

    @staticmethod
    def _session_to_domain(model: SessionModel) -> Session:
        return Session(
            id=model.id,
            user_id=model.user_id,
            source_address=model.source_address,
            user_agent=model.user_agent,
            started_at=model.started_at,
            last_activity_at=model.last_activity_at,
            ended_at=model.ended_at,
            is_active=model.is_active,
            location=model.location,
        )

    @staticmethod
    def _session_to_model(session: Session) -> SessionModel:
        return SessionModel(
            id=session.id,
            user_id=session.user_id,
            source_address=session.source_address,
            user_agent=session.user_agent,
            location=session.location,
            started_at=session.started_at,
            last_activity_at=session.last_activity_at,
            ended_at=session.ended_at,
            is_active=session.is_active,
            created_at=session.started_at,
        )


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _stale_write(user_id: UUID) -> ConflictError:
    return ConflictError(
        code=ErrorCode.CONCURRENT_MODIFICATION,
        message="User was modified by another request",
        resource_type="User",
        conflicting_field="version",
        retryable=True,
        details={"user_id": str(user_id)},
    )
