from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.core.exceptions import (
    AlreadyExistsError,
    AuthorizationError,
    InsufficientPermissionsError,
)
from app.core.security import create_access_token
from app.schemas.auth import IdentityClaim
from app.services import identity_service
from app.services.authorization import (
    AuthorizationGate,
    ClaimRoleResolver,
    StoreRoleResolver,
    build_gate,
)
from conftest import PASSWORD, auth_header, create_member, set_profile_fields


# ==================== Identity endpoints ====================


@pytest.mark.asyncio
async def test_signup_and_login(client: AsyncClient):
    signup = await client.post(
        "/api/auth/signup",
        json={"email": "New@Example.com", "password": PASSWORD, "fbName": "Newbie"},
    )

    assert signup.status_code == 201
    uid = signup.json()["uid"]
    assert signup.json()["email"] == "new@example.com"

    login = await client.post(
        "/api/auth/login", data={"username": "new@example.com", "password": PASSWORD}
    )
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"

    me = await client.get("/api/auth/me", headers=auth_header(login.json()["access_token"]))
    assert me.status_code == 200
    assert me.json()["uid"] == uid
    assert me.json()["fbName"] == "Newbie"
    assert "role" not in me.json()


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient):
    payload = {"email": "dup@example.com", "password": PASSWORD}
    await client.post("/api/auth/signup", json=payload)

    response = await client.post("/api/auth/signup", json=payload)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_account_concurrent_duplicate_is_conflict(db_session, monkeypatch):
    await identity_service.create_account(db_session, "taken@example.com", PASSWORD)

    async def not_found(db, email):
        return None

    monkeypatch.setattr(identity_service, "get_account_by_email", not_found)

    with pytest.raises(AlreadyExistsError):
        await identity_service.create_account(db_session, "Taken@example.com", PASSWORD)

    # Session is usable again after the rollback
    monkeypatch.undo()
    account = await identity_service.get_account_by_email(db_session, "taken@example.com")
    assert account is not None


@pytest.mark.asyncio
async def test_signup_short_password(client: AsyncClient):
    response = await client.post(
        "/api/auth/signup", json={"email": "short@example.com", "password": "123"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await client.post("/api/auth/signup", json={"email": "a@example.com", "password": PASSWORD})

    response = await client.post(
        "/api/auth/login", data={"username": "a@example.com", "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json()["code"] == "AUTH_INVALID_CREDENTIALS"


# ==================== Token verification ====================


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: no token"


@pytest.mark.asyncio
async def test_non_bearer_scheme_counts_as_missing(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Basic abc"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: no token"


@pytest.mark.asyncio
async def test_malformed_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers=auth_header("not.a.jwt"))

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: invalid token"
    assert response.json()["code"] == "AUTH_TOKEN_INVALID"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient):
    token = create_access_token("someone", expires_delta=timedelta(minutes=-5))

    response = await client.get("/api/auth/me", headers=auth_header(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: token expired"
    assert response.json()["code"] == "AUTH_TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_token_signed_with_other_key(client: AsyncClient):
    from jose import jwt

    token = jwt.encode({"sub": "someone", "role": "superadmin"}, "other-key", algorithm="HS256")

    response = await client.get("/api/users", headers=auth_header(token))

    assert response.status_code == 401


# ==================== Authorization gate ====================


@pytest.mark.asyncio
async def test_claim_resolver_builds_profile_from_claims():
    resolver = ClaimRoleResolver()

    profile = await resolver.resolve(IdentityClaim(uid="u1", email="a@b.c", role="admin"))

    assert profile.uid == "u1"
    assert profile.role == "admin"
    assert profile.fb_name == "N/A"
    assert profile.status == "approved"
    assert profile.source == "claims"


@pytest.mark.asyncio
async def test_claim_resolver_defers_without_admin_role():
    resolver = ClaimRoleResolver()

    assert await resolver.resolve(IdentityClaim(uid="u1")) is None
    assert await resolver.resolve(IdentityClaim(uid="u1", role="user")) is None


@pytest.mark.asyncio
async def test_store_resolver_missing_profile(db_session):
    resolver = StoreRoleResolver(db_session)

    with pytest.raises(AuthorizationError) as exc_info:
        await resolver.resolve(IdentityClaim(uid="ghost"))

    assert exc_info.value.message == "Forbidden: profile not found"


@pytest.mark.asyncio
async def test_gate_rejects_role_outside_requirement():
    gate = AuthorizationGate([ClaimRoleResolver()])

    with pytest.raises(InsufficientPermissionsError):
        await gate.authorize(IdentityClaim(uid="u1", role="admin"), ["superadmin"])


def test_gate_needs_a_resolver():
    with pytest.raises(ValueError):
        AuthorizationGate([])


@pytest.mark.asyncio
async def test_build_gate_resolver_order(db_session):
    default_gate = build_gate(db_session)
    strict_gate = build_gate(db_session, always_verify_in_store=True)

    assert [type(r) for r in default_gate.resolvers] == [ClaimRoleResolver, StoreRoleResolver]
    assert [type(r) for r in strict_gate.resolvers] == [StoreRoleResolver]


@pytest.mark.asyncio
async def test_fast_path_trusts_claims_without_profile(client: AsyncClient):
    # No profile exists for this uid; the embedded admin role is enough
    token = create_access_token("claims-only", {"role": "admin", "email": "c@example.com"})

    response = await client.get("/api/users", headers=auth_header(token))

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_slow_path_without_profile_forbidden(client: AsyncClient):
    token = create_access_token("nobody")

    response = await client.get("/api/users", headers=auth_header(token))

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: profile not found"


@pytest.mark.asyncio
async def test_stale_claims_keep_access_until_store_is_checked(
    client: AsyncClient, database, monkeypatch
):
    from app.config import settings

    token, uid = await create_member(client, database, "demoted@example.com", role="admin")
    # Demoted in the store only; the issued token still says admin
    await set_profile_fields(database, uid, role="user")

    assert (await client.get("/api/users", headers=auth_header(token))).status_code == 200

    monkeypatch.setattr(settings, "ALWAYS_VERIFY_ROLE_IN_STORE", True)

    assert (await client.get("/api/users", headers=auth_header(token))).status_code == 403
