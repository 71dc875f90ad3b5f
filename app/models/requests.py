from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

# service별 requests 구조 정의
# 대시보드 프론트엔드가 camelCase로 전송 => alias로 받고 snake_case 필드명도 허용

TransportType = Literal["metro", "microbus", "minibus", "bus", "taxi", "tram"]
StationType = Literal["metro", "bus_stop", "terminal", "interchange"]
Currency = Literal["EGP", "USD", "EUR"]
ConnectionType = Literal["tram", "metro"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# 위치 정보
class LocationIn(_RequestModel):
    lat: float = Field(..., ge=-90, le=90, description="위도")
    lng: float = Field(..., ge=-180, le=180, description="경도")
    address: Optional[str] = Field(default="", description="주소")


class LocationUpdate(_RequestModel):
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = None


class PathPoint(_RequestModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# 역 생성
class StationCreateRequest(_RequestModel):
    name: str = Field(..., min_length=1, description="역 이름")
    description: Optional[str] = Field(default="")
    station_type: StationType = Field(..., alias="stationType")
    location: LocationIn
    facilities: List[str] = Field(default_factory=list)


# 역 수정 (부분 수정)
class StationUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    station_type: Optional[StationType] = Field(None, alias="stationType")
    location: Optional[LocationUpdate] = None
    facilities: Optional[List[str]] = None


class PricingIn(_RequestModel):
    base_price: float = Field(..., ge=0, alias="basePrice")
    price_per_station: float = Field(default=0, ge=0, alias="pricePerStation")
    currency: Currency = "EGP"


class PricingUpdate(_RequestModel):
    base_price: Optional[float] = Field(None, ge=0, alias="basePrice")
    price_per_station: Optional[float] = Field(None, ge=0, alias="pricePerStation")
    currency: Optional[Currency] = None


# 노선 생성
class RouteCreateRequest(_RequestModel):
    name: str = Field(..., min_length=1, max_length=50, description="노선 이름")
    description: Optional[str] = Field(default="", max_length=200)
    transport_type: TransportType = Field(..., alias="transportType")
    station_ids: List[str] = Field(
        ..., min_length=2, alias="stationIds", description="역 id (순서 = 진행 방향)"
    )
    path: List[PathPoint] = Field(default_factory=list, description="지도 표시용 경로")
    distance: float = Field(default=0, ge=0)
    duration: float = Field(default=0, ge=0)
    pricing: PricingIn


# 노선 수정 (부분 수정)
class RouteUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    transport_type: Optional[TransportType] = Field(None, alias="transportType")
    station_ids: Optional[List[str]] = Field(None, min_length=2, alias="stationIds")
    path: Optional[List[PathPoint]] = None
    distance: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0)
    pricing: Optional[PricingUpdate] = None


# 관리자 로그인
class AdminLoginRequest(_RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# 관리자 생성 (super_admin 전용)
class AdminCreateRequest(_RequestModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Literal["admin", "super_admin"] = "admin"


# User 회원가입 요청
class UserRegisterRequest(_RequestModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9]\d{0,15}$")


# User 로그인 요청
class UserLoginRequest(_RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserProfileUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9]\d{0,15}$")
    location: Optional[PathPoint] = None  # {lat, lng}


class ChangePasswordRequest(_RequestModel):
    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(..., min_length=6, alias="newPassword")


# 노선도 연결(라인) 생성
# 기존 대시보드 호환: type, stationsId 키 사용
class ConnectionCreateRequest(_RequestModel):
    name: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1, max_length=32, description="예: #E30613")
    description: Optional[str] = Field(default="")
    connection_type: ConnectionType = Field(..., alias="type")
    station_ids: List[str] = Field(..., min_length=1, alias="stationsId")


class ConnectionUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    description: Optional[str] = None
    connection_type: Optional[ConnectionType] = Field(None, alias="type")
    station_ids: Optional[List[str]] = Field(None, min_length=1, alias="stationsId")


# 관리자 수정 (super_admin 전용)
class AdminUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    role: Optional[Literal["admin", "super_admin"]] = None
    is_active: Optional[bool] = Field(None, alias="isActive")


# 대시보드: 관리자가 사용자 정보 수정
class UserAdminUpdateRequest(_RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9]\d{0,15}$")
    is_active: Optional[bool] = Field(None, alias="isActive")
