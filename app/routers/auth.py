import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from app.database import get_db
from app.models.user import User
from app.auth import (
    create_token,
    get_current_user,
    hash_password,
    verify_password,
    UserPrincipal,
)
from app.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    UserSummary,
    CurrentUserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _exists(db: AsyncSession, condition) -> bool:
    return await db.scalar(select(User.id).where(condition).limit(1)) is not None


@router.post("/register", response_model=RegisterResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """
    Create a user and return a token for it.
    Body: {"username": "alice", "email": "a@x.com", "passwordHash": "<plaintext>"}
    """
    user = User(
        username=data.username,
        email=data.email,
        password_hash=await run_in_threadpool(hash_password, data.password_hash),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # The unique constraints decide; work out which one fired for the message.
        await db.rollback()
        if await _exists(db, User.username == data.username):
            return JSONResponse(status_code=400, content={"message": "Username already exists"})
        if await _exists(db, User.email == data.email):
            return JSONResponse(status_code=400, content={"message": "Email already exists"})
        raise

    logger.info("Registered user %s", user.username)
    return RegisterResponse(
        message="User registered successfully",
        token=create_token(user),
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await db.scalar(select(User).where(User.username == data.username))
    if user is None or not await run_in_threadpool(verify_password, data.password, user.password_hash):
        logger.warning("Failed login for username %r", data.username)
        raise HTTPException(status_code=401)

    return LoginResponse(token=create_token(user), user=UserSummary.model_validate(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: UserPrincipal = Depends(get_current_user)):
    """Return the identity carried by the caller's token."""
    return CurrentUserResponse(
        id=current_user.user_id,
        username=current_user.username,
        expires_at=current_user.expires_at,
    )
