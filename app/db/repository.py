"""
역/노선/연결(라인) 저장소 (PostgreSQL)

노선 조회 시 역 참조를 역 정보로 populate 하며,
존재하지 않거나 비활성화된 역 참조는 조용히 제외함 (복구하지 않음)
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from psycopg2 import sql
from psycopg2.extras import Json

from app.db.database import get_db_cursor
from app.models.domain import Connection, Location, Pricing, Route, Station, StationRef

logger = logging.getLogger(__name__)


_STATION_COLUMNS = """
    station_id, name, description, station_type, lat, lng, address,
    facilities, is_active, created_by, created_at, updated_at
"""

_ROUTE_COLUMNS = """
    route_id, name, description, transport_type, path, distance, duration,
    base_price, price_per_station, currency, is_active, created_by,
    created_at, updated_at
"""

# update 허용 컬럼 (요청 필드명 == 컬럼명)
STATION_UPDATABLE = {
    "name",
    "description",
    "station_type",
    "lat",
    "lng",
    "address",
    "facilities",
}
ROUTE_UPDATABLE = {
    "name",
    "description",
    "transport_type",
    "path",
    "distance",
    "duration",
    "base_price",
    "price_per_station",
    "currency",
}


# ========== row mapping ==========


def row_to_station(row: Dict) -> Station:
    return Station(
        station_id=str(row["station_id"]),
        name=row["name"],
        station_type=row["station_type"],
        location=Location(
            lat=float(row["lat"]),
            lng=float(row["lng"]),
            address=row.get("address") or "",
        ),
        description=row.get("description") or "",
        facilities=list(row.get("facilities") or []),
        is_active=row.get("is_active", True),
        created_by=str(row["created_by"]) if row.get("created_by") else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def row_to_station_ref(row: Dict) -> StationRef:
    return StationRef(
        station_id=str(row["station_id"]),
        name=row["name"],
        station_type=row.get("station_type"),
        location=Location(
            lat=float(row["lat"]),
            lng=float(row["lng"]),
            address=row.get("address") or "",
        ),
    )


def row_to_route(row: Dict, stations: List[StationRef]) -> Route:
    return Route(
        route_id=str(row["route_id"]),
        name=row["name"],
        transport_type=row["transport_type"],
        stations=stations,
        pricing=Pricing(
            base_price=float(row["base_price"]),
            price_per_station=float(row.get("price_per_station") or 0),
            currency=row.get("currency") or "EGP",
        ),
        distance=float(row.get("distance") or 0),
        duration=float(row.get("duration") or 0),
        description=row.get("description") or "",
        path=list(row.get("path") or []),
        is_active=row.get("is_active", True),
        created_by=str(row["created_by"]) if row.get("created_by") else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _set_clause(fields: Dict) -> sql.Composed:
    return sql.SQL(", ").join(
        [sql.SQL("{} = %s").format(sql.Identifier(column)) for column in fields]
        + [sql.SQL("updated_at = NOW()")]
    )


# ========== stations ==========


def list_stations(
    station_type: Optional[str] = None,
    active: Optional[bool] = True,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Station]:
    """역 목록 (최신 생성 순)"""
    query = f"""
    SELECT {_STATION_COLUMNS}
    FROM stations
    WHERE (%(station_type)s IS NULL OR station_type = %(station_type)s)
      AND (%(active)s IS NULL OR is_active = %(active)s)
    ORDER BY created_at DESC
    LIMIT %(limit)s OFFSET %(offset)s
    """
    params = {
        "station_type": station_type,
        "active": active,
        "limit": limit,
        "offset": offset,
    }

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        return [row_to_station(row) for row in cursor.fetchall()]


def count_stations(active: Optional[bool] = True) -> int:
    query = """
    SELECT COUNT(*) AS total
    FROM stations
    WHERE (%(active)s IS NULL OR is_active = %(active)s)
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"active": active})
        row = cursor.fetchone()
        return int(row["total"]) if row else 0


def get_station_by_id(station_id: str) -> Optional[Station]:
    query = f"""
    SELECT {_STATION_COLUMNS}
    FROM stations
    WHERE station_id = %(station_id)s
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"station_id": station_id})
        row = cursor.fetchone()
        return row_to_station(row) if row else None


def find_active_station_ids(station_ids: Iterable[str]) -> Set[str]:
    """주어진 id 중 존재하고 활성화된 역 id 집합"""
    ids = list(station_ids)
    if not ids:
        return set()

    query = """
    SELECT station_id
    FROM stations
    WHERE station_id = ANY(%(station_ids)s::uuid[]) AND is_active = TRUE
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"station_ids": ids})
        return {str(row["station_id"]) for row in cursor.fetchall()}


def insert_station(fields: Dict, created_by: str) -> Station:
    query = f"""
    INSERT INTO stations
        (name, description, station_type, lat, lng, address, facilities, created_by)
    VALUES
        (%(name)s, %(description)s, %(station_type)s, %(lat)s, %(lng)s,
         %(address)s, %(facilities)s, %(created_by)s)
    RETURNING {_STATION_COLUMNS}
    """
    params = {
        "name": fields["name"],
        "description": fields.get("description") or "",
        "station_type": fields["station_type"],
        "lat": fields["lat"],
        "lng": fields["lng"],
        "address": fields.get("address") or "",
        "facilities": list(fields.get("facilities") or []),
        "created_by": created_by,
    }

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        return row_to_station(cursor.fetchone())


def update_station(station_id: str, fields: Dict) -> Optional[Station]:
    fields = {k: v for k, v in fields.items() if k in STATION_UPDATABLE}

    query = sql.SQL(
        "UPDATE stations SET {} WHERE station_id = %s RETURNING " + _STATION_COLUMNS
    ).format(_set_clause(fields))

    with get_db_cursor() as cursor:
        cursor.execute(query, [*fields.values(), station_id])
        row = cursor.fetchone()
        return row_to_station(row) if row else None


def deactivate_station(station_id: str) -> bool:
    """soft delete"""
    query = """
    UPDATE stations SET is_active = FALSE, updated_at = NOW()
    WHERE station_id = %(station_id)s
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"station_id": station_id})
        return cursor.rowcount > 0


# ========== routes ==========


def _populate_stations(cursor, route_ids: List[str]) -> Dict[str, List[StationRef]]:
    """
    노선별 역 목록 populate (position 순)
    INNER JOIN + is_active 조건으로 없어진 역/비활성 역은 제외
    """
    if not route_ids:
        return {}

    query = """
    SELECT rs.route_id, rs.position,
           s.station_id, s.name, s.station_type, s.lat, s.lng, s.address
    FROM route_stations rs
    JOIN stations s ON s.station_id = rs.station_id AND s.is_active = TRUE
    WHERE rs.route_id = ANY(%(route_ids)s::uuid[])
    ORDER BY rs.route_id, rs.position
    """
    cursor.execute(query, {"route_ids": route_ids})

    populated: Dict[str, List[StationRef]] = defaultdict(list)
    for row in cursor.fetchall():
        populated[str(row["route_id"])].append(row_to_station_ref(row))
    return populated


def list_routes(
    transport_type: Optional[str] = None,
    active: Optional[bool] = True,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Route]:
    """노선 목록 (최신 생성 순, 역 정보 populate)"""
    query = f"""
    SELECT {_ROUTE_COLUMNS}
    FROM routes
    WHERE (%(transport_type)s IS NULL OR transport_type = %(transport_type)s)
      AND (%(active)s IS NULL OR is_active = %(active)s)
    ORDER BY created_at DESC
    LIMIT %(limit)s OFFSET %(offset)s
    """
    params = {
        "transport_type": transport_type,
        "active": active,
        "limit": limit,
        "offset": offset,
    }

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        rows = cursor.fetchall()
        populated = _populate_stations(cursor, [str(r["route_id"]) for r in rows])

    return [row_to_route(row, populated.get(str(row["route_id"]), [])) for row in rows]


def count_routes(active: Optional[bool] = True) -> int:
    query = """
    SELECT COUNT(*) AS total
    FROM routes
    WHERE (%(active)s IS NULL OR is_active = %(active)s)
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"active": active})
        row = cursor.fetchone()
        return int(row["total"]) if row else 0


def get_route_by_id(route_id: str) -> Optional[Route]:
    query = f"""
    SELECT {_ROUTE_COLUMNS}
    FROM routes
    WHERE route_id = %(route_id)s
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"route_id": route_id})
        row = cursor.fetchone()
        if not row:
            return None
        populated = _populate_stations(cursor, [str(row["route_id"])])

    return row_to_route(row, populated.get(str(row["route_id"]), []))


def _replace_route_stations(cursor, route_id: str, station_ids: List[str]):
    cursor.execute(
        "DELETE FROM route_stations WHERE route_id = %(route_id)s",
        {"route_id": route_id},
    )
    for position, station_id in enumerate(station_ids):
        cursor.execute(
            """
            INSERT INTO route_stations (route_id, position, station_id)
            VALUES (%(route_id)s, %(position)s, %(station_id)s)
            """,
            {"route_id": route_id, "position": position, "station_id": station_id},
        )


def insert_route(fields: Dict, station_ids: List[str], created_by: str) -> str:
    """노선 + 역 순서를 한 트랜잭션으로 저장, route_id 반환"""
    query = """
    INSERT INTO routes
        (name, description, transport_type, path, distance, duration,
         base_price, price_per_station, currency, created_by)
    VALUES
        (%(name)s, %(description)s, %(transport_type)s, %(path)s, %(distance)s,
         %(duration)s, %(base_price)s, %(price_per_station)s, %(currency)s,
         %(created_by)s)
    RETURNING route_id
    """
    params = {
        "name": fields["name"],
        "description": fields.get("description") or "",
        "transport_type": fields["transport_type"],
        "path": Json(list(fields.get("path") or [])),
        "distance": fields.get("distance") or 0,
        "duration": fields.get("duration") or 0,
        "base_price": fields["base_price"],
        "price_per_station": fields.get("price_per_station") or 0,
        "currency": fields["currency"],
        "created_by": created_by,
    }

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        route_id = str(cursor.fetchone()["route_id"])
        _replace_route_stations(cursor, route_id, station_ids)

    logger.debug(f"노선 저장: route_id={route_id}, stations={len(station_ids)}")
    return route_id


def update_route(
    route_id: str, fields: Dict, station_ids: Optional[List[str]] = None
) -> None:
    fields = {k: v for k, v in fields.items() if k in ROUTE_UPDATABLE}
    if "path" in fields:
        fields["path"] = Json(list(fields["path"] or []))

    query = sql.SQL("UPDATE routes SET {} WHERE route_id = %s").format(
        _set_clause(fields)
    )

    with get_db_cursor() as cursor:
        cursor.execute(query, [*fields.values(), route_id])
        if station_ids is not None:
            _replace_route_stations(cursor, route_id, station_ids)


def deactivate_route(route_id: str) -> bool:
    """soft delete"""
    query = """
    UPDATE routes SET is_active = FALSE, updated_at = NOW()
    WHERE route_id = %(route_id)s
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"route_id": route_id})
        return cursor.rowcount > 0


# ========== connections (노선도 라인 메타데이터) ==========

_CONNECTION_COLUMNS = """
    connection_id, name, color, description, connection_type,
    created_at, updated_at
"""

CONNECTION_UPDATABLE = {"name", "color", "description", "connection_type"}


def row_to_connection(row: Dict, stations: List[StationRef]) -> Connection:
    return Connection(
        connection_id=str(row["connection_id"]),
        name=row["name"],
        color=row["color"],
        connection_type=row["connection_type"],
        stations=stations,
        description=row.get("description") or "",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _populate_connection_stations(
    cursor, connection_ids: List[str]
) -> Dict[str, List[StationRef]]:
    """노선과 같은 규칙: position 순, 비활성/없는 역은 제외"""
    if not connection_ids:
        return {}

    query = """
    SELECT cs.connection_id, cs.position,
           s.station_id, s.name, s.station_type, s.lat, s.lng, s.address
    FROM connection_stations cs
    JOIN stations s ON s.station_id = cs.station_id AND s.is_active = TRUE
    WHERE cs.connection_id = ANY(%(connection_ids)s::uuid[])
    ORDER BY cs.connection_id, cs.position
    """
    cursor.execute(query, {"connection_ids": connection_ids})

    populated: Dict[str, List[StationRef]] = defaultdict(list)
    for row in cursor.fetchall():
        populated[str(row["connection_id"])].append(row_to_station_ref(row))
    return populated


def list_connections() -> List[Connection]:
    query = f"""
    SELECT {_CONNECTION_COLUMNS}
    FROM connections
    ORDER BY created_at DESC
    """

    with get_db_cursor() as cursor:
        cursor.execute(query)
        rows = cursor.fetchall()
        populated = _populate_connection_stations(
            cursor, [str(r["connection_id"]) for r in rows]
        )

    return [
        row_to_connection(row, populated.get(str(row["connection_id"]), []))
        for row in rows
    ]


def get_connection_by_id(connection_id: str) -> Optional[Connection]:
    query = f"""
    SELECT {_CONNECTION_COLUMNS}
    FROM connections
    WHERE connection_id = %(connection_id)s
    """

    with get_db_cursor() as cursor:
        cursor.execute(query, {"connection_id": connection_id})
        row = cursor.fetchone()
        if not row:
            return None
        populated = _populate_connection_stations(cursor, [str(row["connection_id"])])

    return row_to_connection(row, populated.get(str(row["connection_id"]), []))


def _replace_connection_stations(cursor, connection_id: str, station_ids: List[str]):
    cursor.execute(
        "DELETE FROM connection_stations WHERE connection_id = %(connection_id)s",
        {"connection_id": connection_id},
    )
    for position, station_id in enumerate(station_ids):
        cursor.execute(
            """
            INSERT INTO connection_stations (connection_id, position, station_id)
            VALUES (%(connection_id)s, %(position)s, %(station_id)s)
            """,
            {
                "connection_id": connection_id,
                "position": position,
                "station_id": station_id,
            },
        )


def insert_connection(fields: Dict, station_ids: List[str]) -> str:
    query = """
    INSERT INTO connections (name, color, description, connection_type)
    VALUES (%(name)s, %(color)s, %(description)s, %(connection_type)s)
    RETURNING connection_id
    """
    params = {
        "name": fields["name"],
        "color": fields["color"],
        "description": fields.get("description") or "",
        "connection_type": fields["connection_type"],
    }

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        connection_id = str(cursor.fetchone()["connection_id"])
        _replace_connection_stations(cursor, connection_id, station_ids)

    return connection_id


def update_connection(
    connection_id: str, fields: Dict, station_ids: Optional[List[str]] = None
) -> None:
    fields = {k: v for k, v in fields.items() if k in CONNECTION_UPDATABLE}

    # 역 목록만 바뀌어도 updated_at 갱신
    query = sql.SQL("UPDATE connections SET {} WHERE connection_id = %s").format(
        _set_clause(fields)
    )

    with get_db_cursor() as cursor:
        cursor.execute(query, [*fields.values(), connection_id])
        if station_ids is not None:
            _replace_connection_stations(cursor, connection_id, station_ids)


def delete_connection(connection_id: str) -> bool:
    """hard delete (connection_stations는 CASCADE)"""
    with get_db_cursor() as cursor:
        cursor.execute(
            "DELETE FROM connections WHERE connection_id = %(connection_id)s",
            {"connection_id": connection_id},
        )
        return cursor.rowcount > 0
