import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from app.api.deps import CurrentClaim, DbSession
from app.schemas.auth import IdentityClaim, SignupRequest, SignupResponse, Token
from app.services import identity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, db: DbSession) -> SignupResponse:
    """Create an identity account. The profile is registered separately via POST /api/users."""
    account = await identity_service.create_account(db, body.email, body.password, body.fb_name)
    return SignupResponse(uid=account.uid, email=account.email)


@router.post("/login", response_model=Token)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: DbSession,
) -> Token:
    account = await identity_service.authenticate(db, form_data.username, form_data.password)
    return Token(access_token=identity_service.issue_token(account))


@router.get("/me", response_model=IdentityClaim, response_model_exclude_none=True)
async def get_me(claim: CurrentClaim) -> IdentityClaim:
    return claim
