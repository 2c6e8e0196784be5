# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authgate.domain.users.entities import Account as DomainAccount
from authgate.domain.users.entities import AccountStats, NewAccount, ProfileChanges
from authgate.domain.users.entities import LoginAttempt as DomainLoginAttempt
from authgate.domain.users.exceptions import EmailAlreadyRegisteredError
from authgate.domain.users.repositories import AccountRepository, LoginAttemptRepository
from authgate.infrastructure.db.models import Account, LoginAttempt
from authgate.infrastructure.unit_of_work import unit_of_work_scope
from authgate.shared.utils.clock import ensure_utc


def _to_domain(row: Account) -> DomainAccount:
    return DomainAccount(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        display_name=row.display_name,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        last_login_at=ensure_utc(row.last_login_at),
        failed_login_attempts=int(row.failed_login_attempts or 0),
        locked_until=ensure_utc(row.locked_until),
        is_active=bool(row.is_active),
    )


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _scope(
        self, operation: str, *, read_only: bool = False
    ) -> AbstractContextManager[Session]:
        return unit_of_work_scope(
            self._session_factory, f"accounts.{operation}", read_only=read_only
        )

    def find_by_email(self, email: str) -> DomainAccount | None:
        with self._scope("find_by_email", read_only=True) as session:
            row = session.scalars(select(Account).where(Account.email == email)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, account_id: int) -> DomainAccount | None:
        with self._scope("find_by_id", read_only=True) as session:
            row = session.get(Account, account_id)
            return _to_domain(row) if row else None

    def add(self, account: NewAccount) -> DomainAccount:
        with self._scope("add") as session:
            row = Account(
                email=account.email,
                password_hash=account.password_hash,
                display_name=account.display_name,
                created_at=account.created_at,
                updated_at=account.created_at,
                failed_login_attempts=0,
                locked_until=None,
                is_active=True,
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                raise EmailAlreadyRegisteredError() from exc
            session.refresh(row)
            return _to_domain(row)

    def update_login_outcome(
        self,
        account_id: int,
        *,
        failed_attempts: int,
        locked_until: datetime | None,
        last_login_at: datetime | None,
    ) -> None:
        with self._scope("update_login_outcome") as session:
            session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(
                    failed_login_attempts=failed_attempts,
                    locked_until=locked_until,
                    last_login_at=last_login_at,
                )
            )

    def update_profile(
        self, account_id: int, changes: ProfileChanges, *, updated_at: datetime
    ) -> bool:
        values: dict[str, object] = {"updated_at": updated_at}
        if changes.display_name:
            values["display_name"] = changes.display_name
        if changes.password_hash:
            values["password_hash"] = changes.password_hash

        with self._scope("update_profile") as session:
            result = session.execute(
                update(Account).where(Account.id == account_id).values(**values)
            )
            return result.rowcount > 0

    def deactivate(self, account_id: int, *, updated_at: datetime) -> bool:
        with self._scope("deactivate") as session:
            result = session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(is_active=False, updated_at=updated_at)
            )
            return result.rowcount > 0

    def count_stats(self, *, recent_since: datetime) -> AccountStats:
        with self._scope("count_stats", read_only=True) as session:
            total, active, recent = session.execute(
                select(
                    func.count(Account.id),
                    func.coalesce(func.sum(case((Account.is_active.is_(True), 1), else_=0)), 0),
                    func.coalesce(
                        func.sum(case((Account.last_login_at > recent_since, 1), else_=0)), 0
                    ),
                )
            ).one()
        return AccountStats(total=int(total), active=int(active), recent_logins_7d=int(recent))


class SqlAlchemyLoginAttemptRepository(LoginAttemptRepository):
    """Append-only ledger; rows are never updated or deleted here."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _scope(
        self, operation: str, *, read_only: bool = False
    ) -> AbstractContextManager[Session]:
        return unit_of_work_scope(
            self._session_factory, f"login_attempts.{operation}", read_only=read_only
        )

    def append(self, attempt: DomainLoginAttempt) -> None:
        with self._scope("append") as session:
            session.add(
                LoginAttempt(
                    email=attempt.email,
                    ip_address=attempt.ip_address,
                    user_agent=attempt.user_agent,
                    success=attempt.success,
                    attempted_at=attempt.attempted_at,
                )
            )

    def count_recent_failures(self, email: str, ip_address: str, *, since: datetime) -> int:
        with self._scope("count_recent_failures", read_only=True) as session:
            count = session.scalar(
                select(func.count(LoginAttempt.id)).where(
                    LoginAttempt.email == email,
                    LoginAttempt.ip_address == ip_address,
                    LoginAttempt.success.is_(False),
                    LoginAttempt.attempted_at > since,
                )
            )
        return int(count or 0)

    def history_for_email(self, email: str, *, limit: int) -> list[DomainLoginAttempt]:
        with self._scope("history_for_email", read_only=True) as session:
            rows = session.scalars(
                select(LoginAttempt)
                .where(LoginAttempt.email == email)
                .order_by(LoginAttempt.attempted_at.desc(), LoginAttempt.id.desc())
                .limit(limit)
            ).all()
            return [
                DomainLoginAttempt(
                    email=row.email,
                    ip_address=row.ip_address,
                    user_agent=row.user_agent,
                    success=bool(row.success),
                    attempted_at=ensure_utc(row.attempted_at),
                )
                for row in rows
            ]
