from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.auth import get_current_user, hash_password, issue_token, verify_password
from app.config import Settings
from app.deps import get_settings, get_storage
from app.errors import DuplicateError, ValidationError
from app.logging_config import get_logger
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from app.schemas.user import ROLE_EMPLOYER, ROLE_WORKER, UserRecord
from app.storage.base import Storage


router = APIRouter()
logger = get_logger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    username = payload.username.strip().lower()
    if not username:
        raise ValidationError("Username is required", fields=["username"])
    email = payload.email.strip().lower()

    if storage.get_user_by_username(username):
        raise DuplicateError("Username already exists", fields=["username"])
    if storage.get_user_by_email(email):
        raise DuplicateError("Email already exists", fields=["email"])

    user = storage.create_user(
        {
            "username": username,
            "email": email,
            "password_hash": hash_password(payload.password),
            "full_name": payload.full_name.strip(),
            "phone_number": payload.phone_number,
            "role": payload.role,
        }
    )

    if payload.role == ROLE_WORKER and payload.skills:
        storage.create_worker_profile(
            {"user_id": user.id, "skills": payload.skills, "experience": payload.experience}
        )
    elif payload.role == ROLE_EMPLOYER and payload.company_name and payload.industry:
        storage.create_employer_profile(
            {"user_id": user.id, "company_name": payload.company_name, "industry": payload.industry}
        )

    logger.info("user_registered", user_id=user.id, role=user.role)
    return AuthResponse(
        access_token=issue_token(user, settings),
        user_id=user.id,
        username=user.username,
        role=user.role,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    username = payload.username.strip().lower()
    user = storage.get_user_by_username(username)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    return AuthResponse(
        access_token=issue_token(user, settings),
        user_id=user.id,
        username=user.username,
        role=user.role,
    )


@router.get("/me", response_model=MeResponse)
def me(current_user: UserRecord = Depends(get_current_user)) -> MeResponse:
    return MeResponse(
        id=current_user.id,
        username=current_user.username,
        full_name=current_user.full_name,
        role=current_user.role,
        rating=current_user.rating,
    )
