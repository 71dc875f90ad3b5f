# custom exception 정의 및 관리
# 메시지는 API 응답 {"success": false, "error": message}에 그대로 노출됨


class NetworkAPIException(Exception):  # 예외 구조 정의
    def __init__(
        self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


class StationNotFoundException(NetworkAPIException):
    def __init__(self, message: str = "Station not found"):
        super().__init__(message, code="STATION_NOT_FOUND", status_code=404)


class RouteNotFoundException(NetworkAPIException):
    def __init__(self, message: str = "Route not found"):
        super().__init__(message, code="ROUTE_NOT_FOUND", status_code=404)


class InvalidRequestException(NetworkAPIException):
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, code="INVALID_REQUEST", status_code=400)


class AuthenticationException(NetworkAPIException):
    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message, code="NOT_AUTHENTICATED", status_code=401)


class NotAuthorizedException(NetworkAPIException):
    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN", status_code=403)


class ConnectionNotFoundException(NetworkAPIException):
    def __init__(self, message: str = "Connection not found"):
        super().__init__(message, code="CONNECTION_NOT_FOUND", status_code=404)


class AdminNotFoundException(NetworkAPIException):
    def __init__(self, message: str = "Admin not found"):
        super().__init__(message, code="ADMIN_NOT_FOUND", status_code=404)


class UserNotFoundException(NetworkAPIException):
    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND", status_code=404)
