"""
노선망(metro network) 응답 공통 처리
관리자/사용자/공개 엔드포인트 3곳이 같은 집계 결과를 반환
"""

from fastapi.responses import JSONResponse
import logging

from app.core.config import METRO_TRANSPORT_TYPE
from app.models.network import to_envelope
from app.models.responses import ErrorResponse
from app.services.network_service import NetworkService

logger = logging.getLogger(__name__)


def metro_network_response(caller: str):
    """
    성공: 200 {success: true, data: NetworkView}
    실패: 500 {success: false, error: "Server error"} (부분 결과 없음)
    """
    try:
        view = NetworkService.get_network_view(METRO_TRANSPORT_TYPE)
        return to_envelope(view)
    except Exception as e:
        logger.error(f"노선망 조회 오류 ({caller}): {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Server error").model_dump(),
        )
