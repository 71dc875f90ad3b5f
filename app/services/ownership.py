from typing import Optional
from uuid import UUID

from app.core.exceptions import InvalidRequestException, NotAuthorizedException
from app.models.domain import Admin


def parse_id(value: str, kind: str) -> str:
    """UUID 형식 검증 (잘못된 id로 DB 에러가 나지 않도록)"""
    try:
        return str(UUID(str(value)))
    except ValueError:
        raise InvalidRequestException(f"Invalid {kind} id")


def can_modify(owner_id: Optional[str], admin: Admin) -> bool:
    # 생성한 관리자 또는 super_admin만 수정/삭제 가능
    return admin.is_super_admin or (
        owner_id is not None and str(owner_id) == str(admin.admin_id)
    )


def ensure_can_modify(owner_id: Optional[str], admin: Admin, kind: str, action: str):
    if not can_modify(owner_id, admin):
        raise NotAuthorizedException(f"Not authorized to {action} this {kind}")
