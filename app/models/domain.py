from typing import List, Optional, Dict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.core.config import DEFAULT_CURRENCY

# domain 정의
# id는 DB에서 발급한 UUID 문자열 (집계 로직에서는 opaque 값으로만 취급)


@dataclass
class Location:
    lat: float
    lng: float
    address: str = ""


@dataclass
class Station:
    station_id: str
    name: str
    station_type: str  # metro / bus_stop / terminal / interchange
    location: Location
    description: str = ""
    facilities: List[str] = field(default_factory=list)
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# 노선에 populate된 역 정보 (id, name, type, location만)
@dataclass
class StationRef:
    station_id: str
    name: str
    location: Location
    station_type: Optional[str] = None


@dataclass
class Pricing:
    base_price: float
    price_per_station: float = 0.0  # metro 노선만 의미 있음
    currency: str = DEFAULT_CURRENCY


@dataclass
class Route:
    route_id: str
    name: str
    transport_type: str
    stations: List[StationRef]  # 순서 = 노선 진행 방향
    pricing: Pricing
    distance: float = 0.0
    duration: float = 0.0
    description: str = ""
    path: List[Dict[str, float]] = field(default_factory=list)  # [{lat, lng}, ...]
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# 노선도에 그리는 연결(라인) 메타데이터 (tram/metro)
# 노선망 집계에는 사용하지 않음
@dataclass
class Connection:
    connection_id: str
    name: str
    color: str
    connection_type: str  # tram / metro
    stations: List[StationRef] = field(default_factory=list)
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _is_locked(lock_until: Optional[datetime]) -> bool:
    return lock_until is not None and lock_until > datetime.now(timezone.utc)


@dataclass
class Admin:
    admin_id: str
    name: str
    email: str
    role: str = "admin"  # admin / super_admin
    is_active: bool = True
    login_attempts: int = 0
    lock_until: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_locked(self) -> bool:
        return _is_locked(self.lock_until)

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"


@dataclass
class User:
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str = "user"  # user / premium_user
    is_active: bool = True
    is_verified: bool = False
    login_attempts: int = 0
    lock_until: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    location: Optional[Location] = None  # 사용자가 공유한 마지막 위치 (주변 사용자 조회용)

    @property
    def is_locked(self) -> bool:
        return _is_locked(self.lock_until)
