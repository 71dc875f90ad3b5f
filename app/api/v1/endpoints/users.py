from fastapi import APIRouter, Depends, Response, status
import logging

from app.api.deps import get_current_user
from app.api.v1.endpoints.network import metro_network_response
from app.auth.security import create_access_token, USER_ACTOR
from app.core.config import settings, USER_TOKEN_COOKIE
from app.core.exceptions import InvalidRequestException
from app.models.domain import Location, User
from app.models.network import to_envelope
from app.models.requests import (
    ChangePasswordRequest,
    UserLoginRequest,
    UserProfileUpdateRequest,
    UserRegisterRequest,
)
from app.models.responses import user_to_dict
from app.services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User, response: Response) -> str:
    token = create_access_token(user.user_id, actor=USER_ACTOR, role=user.role)
    response.set_cookie(
        key=USER_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.USER_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )
    return token


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegisterRequest, response: Response):
    user = AuthService.register_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        phone=user_data.phone,
    )
    token = _issue_token(user, response)

    logger.info(f"사용자 가입: {user.email}")
    return {"success": True, "token": token, "data": user_to_dict(user)}


@router.post("/login")
def login(credentials: UserLoginRequest, response: Response):
    user = AuthService.authenticate_user(credentials.email, credentials.password)
    token = _issue_token(user, response)
    return {"success": True, "token": token, "data": user_to_dict(user)}


@router.post("/logout")
def logout(response: Response, user: User = Depends(get_current_user)):
    response.delete_cookie(USER_TOKEN_COOKIE)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return to_envelope(user_to_dict(user))


@router.put("/profile")
def update_profile(
    profile: UserProfileUpdateRequest, user: User = Depends(get_current_user)
):
    location = (
        Location(lat=profile.location.lat, lng=profile.location.lng)
        if profile.location
        else None
    )
    updated = AuthService.update_profile(
        user.user_id, name=profile.name, phone=profile.phone, location=location
    )
    if updated is None:
        raise InvalidRequestException("User not found")
    return to_envelope(user_to_dict(updated))


@router.put("/change-password")
def change_password(
    passwords: ChangePasswordRequest, user: User = Depends(get_current_user)
):
    AuthService.change_password(
        user.user_id, passwords.current_password, passwords.new_password
    )
    logger.info(f"비밀번호 변경: {user.email}")
    return {"success": True, "message": "Password updated successfully"}


@router.get("/metro-network")
def get_metro_network(user: User = Depends(get_current_user)):
    return metro_network_response("user")
