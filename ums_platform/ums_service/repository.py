"""
Credential store: persistence of accounts and session rows.

Each operation runs in its own short-lived ORM session, so the store holds no
state of its own besides the engine's connection pool. Updates and deletes are
single statements and rely on the database's row-level atomicity.
"""
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import AccountAlreadyExists, StoreError
from .models import User, UserSession


class CredentialStore(Protocol):
    def insert_user(self, user: User) -> User: ...

    def get_user_by_username(self, username: str) -> Optional[User]: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def insert_session(self, session: UserSession) -> UserSession: ...

    def delete_session(self, token: str) -> int: ...

    def get_session_by_token(self, token: str) -> Optional[UserSession]: ...

    def get_session_by_refresh_token(self, refresh_token: str) -> Optional[UserSession]: ...

    def update_token_by_refresh_token(self, token: str, token_expired: datetime, refresh_token: str) -> int: ...


class SqlAlchemyCredentialStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def insert_user(self, user: User) -> User:
        with self._session_factory() as db:
            try:
                db.add(user)
                db.commit()
                db.refresh(user)
            except IntegrityError as e:
                db.rollback()
                raise AccountAlreadyExists("username or email already registered") from e
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError("failed to insert user") from e
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session_factory() as db:
            try:
                return db.query(User).filter(User.username == username).first()
            except SQLAlchemyError as e:
                raise StoreError("failed to get user by username") from e

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session_factory() as db:
            try:
                return db.query(User).filter(User.email == email).first()
            except SQLAlchemyError as e:
                raise StoreError("failed to get user by email") from e

    def insert_session(self, session: UserSession) -> UserSession:
        with self._session_factory() as db:
            try:
                db.add(session)
                db.commit()
                db.refresh(session)
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError("failed to insert user session") from e
        return session

    def delete_session(self, token: str) -> int:
        with self._session_factory() as db:
            try:
                deleted = (
                    db.query(UserSession)
                    .filter(UserSession.token == token)
                    .delete(synchronize_session=False)
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError("failed to delete user session") from e
        return deleted

    def get_session_by_token(self, token: str) -> Optional[UserSession]:
        with self._session_factory() as db:
            try:
                return db.query(UserSession).filter(UserSession.token == token).first()
            except SQLAlchemyError as e:
                raise StoreError("failed to get user session by token") from e

    def get_session_by_refresh_token(self, refresh_token: str) -> Optional[UserSession]:
        with self._session_factory() as db:
            try:
                return (
                    db.query(UserSession)
                    .filter(UserSession.refresh_token == refresh_token)
                    .first()
                )
            except SQLAlchemyError as e:
                raise StoreError("failed to get user session by refresh token") from e

    def update_token_by_refresh_token(self, token: str, token_expired: datetime, refresh_token: str) -> int:
        """
        Replace the access token of the session owning `refresh_token`.

        Returns:
            Number of rows updated (0 or 1)
        """
        with self._session_factory() as db:
            try:
                updated = (
                    db.query(UserSession)
                    .filter(UserSession.refresh_token == refresh_token)
                    .update(
                        {UserSession.token: token, UserSession.token_expired: token_expired},
                        synchronize_session=False,
                    )
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError("failed to update token by refresh token") from e
        return updated
