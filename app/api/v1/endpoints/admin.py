from fastapi import APIRouter, Depends, Response, status
import logging

from app.api.deps import get_current_admin, require_super_admin
from app.api.v1.endpoints.network import metro_network_response
from app.auth.security import create_access_token, ADMIN_ACTOR
from app.core.config import settings, ADMIN_TOKEN_COOKIE
from app.models.domain import Admin
from app.models.network import to_envelope
from app.models.requests import (
    AdminCreateRequest,
    AdminLoginRequest,
    AdminUpdateRequest,
)
from app.models.responses import admin_to_dict
from app.services.auth_service import AuthService
from app.services.ownership import parse_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login")
def login(credentials: AdminLoginRequest, response: Response):
    admin = AuthService.authenticate_admin(credentials.email, credentials.password)

    token = create_access_token(admin.admin_id, actor=ADMIN_ACTOR, role=admin.role)

    # 대시보드는 쿠키, API 클라이언트는 Bearer 헤더 사용
    response.set_cookie(
        key=ADMIN_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ADMIN_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )

    logger.info(f"관리자 로그인: {admin.email}")
    return {"success": True, "token": token, "data": admin_to_dict(admin)}


@router.post("/logout")
def logout(response: Response, admin: Admin = Depends(get_current_admin)):
    response.delete_cookie(ADMIN_TOKEN_COOKIE)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
def get_me(admin: Admin = Depends(get_current_admin)):
    return to_envelope(admin_to_dict(admin))


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_admin(
    admin_data: AdminCreateRequest, current: Admin = Depends(require_super_admin)
):
    admin = AuthService.create_admin(
        name=admin_data.name,
        email=admin_data.email,
        password=admin_data.password,
        role=admin_data.role,
    )
    logger.info(f"관리자 생성: {admin.email} ({admin.role}) by {current.email}")
    return to_envelope(admin_to_dict(admin))


@router.get("/admins")
def list_admins(current: Admin = Depends(require_super_admin)):
    admins = AuthService.list_admins()
    return {
        "success": True,
        "count": len(admins),
        "data": [admin_to_dict(a) for a in admins],
    }


@router.put("/admins/{admin_id}")
def update_admin(
    admin_id: str,
    admin_data: AdminUpdateRequest,
    current: Admin = Depends(require_super_admin),
):
    admin = AuthService.update_admin(
        parse_id(admin_id, "admin"),
        name=admin_data.name,
        email=admin_data.email,
        role=admin_data.role,
        is_active=admin_data.is_active,
    )
    logger.info(f"관리자 수정: {admin.email} by {current.email}")
    return to_envelope(admin_to_dict(admin))


@router.delete("/admins/{admin_id}")
def delete_admin(admin_id: str, current: Admin = Depends(require_super_admin)):
    AuthService.delete_admin(parse_id(admin_id, "admin"))
    logger.info(f"관리자 삭제: {admin_id} by {current.email}")
    return {"success": True, "message": "Admin deleted successfully"}


@router.get("/metro-network")
def get_metro_network(admin: Admin = Depends(get_current_admin)):
    return metro_network_response("admin")
