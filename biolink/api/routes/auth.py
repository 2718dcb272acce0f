import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from biolink.adapters.sqlite.repos import SQLiteUserRepo
from biolink.api.auth_utils import check_password, hash_password, issue_session_token, session_ttl
from biolink.api.deps import get_current_user, get_rules, get_user_repo
from biolink.api.schemas import RegisterRequest, Token, UserResponse
from biolink.domain.entities import User
from biolink.domain.errors import DuplicateKeyError
from biolink.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    data: RegisterRequest,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    rules: Rules = Depends(get_rules),
) -> UserResponse:
    """Create an account."""
    email = data.email.strip().lower()
    if "@" not in email:
        raise HTTPException(
            status_code=400,
            detail={"message": "Invalid email address", "field": "email", "code": "email_invalid"},
        )
    if len(data.password) < rules.auth.password_min_length:
        raise HTTPException(
            status_code=400,
            detail={
                "message": (
                    f"Password must be at least {rules.auth.password_min_length} characters"
                ),
                "field": "password",
                "code": "password_too_short",
            },
        )

    email_taken = {"message": "Email already registered", "field": "email", "code": "email_taken"}
    if user_repo.get_by_email(email):
        raise HTTPException(status_code=400, detail=email_taken)

    user = User(email=email, password_hash=hash_password(data.password))
    try:
        user_repo.save(user)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail=email_taken) from None

    logger.info("Registered user %s", user.id)
    return UserResponse(id=str(user.id), email=user.email)


@router.post("/login", response_model=Token)
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate user and return access token."""
    user = user_repo.get_by_email(form_data.username.strip().lower())
    if not user or not check_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = issue_session_token(user.id, rules.auth)
    max_age = int(session_ttl(rules.auth).total_seconds())

    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=max_age,
        expires=max_age,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )

    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Get current user info."""
    return UserResponse(id=str(current_user.id), email=current_user.email)
