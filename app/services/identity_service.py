"""
Identity provider operations: sign-in accounts, token issuing and the
custom-claim store that bearer tokens embed.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    IdentityAccountNotFoundError,
    InvalidCredentialsError,
)
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.identity_account import IdentityAccount
from app.schemas.auth import IdentityClaim

logger = logging.getLogger(__name__)


async def get_account_by_uid(db: AsyncSession, uid: str) -> IdentityAccount | None:
    result = await db.execute(select(IdentityAccount).where(IdentityAccount.uid == uid))
    return result.scalar_one_or_none()


async def get_account_by_email(db: AsyncSession, email: str) -> IdentityAccount | None:
    result = await db.execute(
        select(IdentityAccount).where(IdentityAccount.email == email.lower())
    )
    return result.scalar_one_or_none()


async def create_account(
    db: AsyncSession,
    email: str,
    password: str,
    fb_name: str | None = None,
) -> IdentityAccount:
    if await get_account_by_email(db, email):
        raise AlreadyExistsError("Email already registered", field="email")

    claims: dict[str, Any] = {}
    if fb_name:
        claims["fbName"] = fb_name

    account = IdentityAccount(
        email=email.lower(),
        password_hash=hash_password(password),
        custom_claims=claims,
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AlreadyExistsError("Email already registered", field="email")
    await db.refresh(account)
    logger.info("Created identity account %s", account.uid)
    return account


async def authenticate(db: AsyncSession, email: str, password: str) -> IdentityAccount:
    account = await get_account_by_email(db, email)
    if account is None or not verify_password(password, account.password_hash):
        raise InvalidCredentialsError()
    if account.disabled:
        raise AuthenticationError("Account is disabled")
    return account


def issue_token(account: IdentityAccount) -> str:
    claims = {"email": account.email, **(account.custom_claims or {})}
    return create_access_token(account.uid, claims)


def verify_token(token: str | None) -> IdentityClaim:
    """Verify a bearer token and return the claim it carries."""
    if not token:
        raise AuthenticationError("Unauthorized: no token")
    payload = decode_access_token(token)
    return IdentityClaim.from_token_payload(payload)


async def set_custom_claims(
    db: AsyncSession,
    uid: str,
    claims: dict[str, Any],
    commit: bool = True,
) -> IdentityAccount:
    """
    Merge ``claims`` into the account's custom claims.

    Tokens issued afterwards carry the new values; tokens already in the
    caller's hands keep the old ones until they expire.
    """
    account = await get_account_by_uid(db, uid)
    if account is None:
        raise IdentityAccountNotFoundError(uid)

    # Reassign so the JSON column is flagged dirty
    account.custom_claims = {**(account.custom_claims or {}), **claims}
    if commit:
        await db.commit()
    else:
        await db.flush()
    logger.info("Updated custom claims for %s: %s", uid, sorted(claims))
    return account


async def delete_account(db: AsyncSession, uid: str, commit: bool = True) -> None:
    account = await get_account_by_uid(db, uid)
    if account is None:
        raise IdentityAccountNotFoundError(uid)

    await db.delete(account)
    if commit:
        await db.commit()
    else:
        await db.flush()
    logger.info("Deleted identity account %s", uid)
