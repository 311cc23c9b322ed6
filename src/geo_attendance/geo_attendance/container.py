from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceEventRepository
from .attendance.registry import RecorderRegistry
from .attendance.repository import AttendanceEventRepository
from .attendance.resolver import AttendanceStateResolver
from .attendance.service import AttendanceService
from .auth.session_guard import SessionGuard
from .core.constants import DEFAULT_HISTORY_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .geofence.evaluator import GeofenceEvaluator
from .geofence.mysql_geofence_repository import MySQLGeofenceSettingRepository
from .geofence.repository import GeofenceSettingRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    events_repo: AttendanceEventRepository
    geofence_repo: GeofenceSettingRepository

    session_guard: SessionGuard
    auth_service: AuthService
    resolver: AttendanceStateResolver
    evaluator: GeofenceEvaluator
    recorders: RecorderRegistry
    attendance_service: AttendanceService


def assemble(
    *,
    users_repo: UserRepository,
    events_repo: AttendanceEventRepository,
    geofence_repo: GeofenceSettingRepository,
    session_guard: Optional[SessionGuard] = None,
    conn: Optional[DatabaseConnection] = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    """Wire services on top of the given repositories."""
    session_guard = session_guard or SessionGuard()
    resolver = AttendanceStateResolver(events_repo)
    evaluator = GeofenceEvaluator(geofence_repo)
    recorders = RecorderRegistry(
        session_guard=session_guard,
        resolver=resolver,
        evaluator=evaluator,
        events=events_repo,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        events_repo=events_repo,
        geofence_repo=geofence_repo,
        session_guard=session_guard,
        auth_service=AuthService(users_repo),
        resolver=resolver,
        evaluator=evaluator,
        recorders=recorders,
        attendance_service=AttendanceService(events_repo, history_limit=history_limit),
    )


def build_container(*, db_config: dict, history_limit: int = DEFAULT_HISTORY_LIMIT) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        events_repo=MySQLAttendanceEventRepository(conn),
        geofence_repo=MySQLGeofenceSettingRepository(conn),
        conn=conn,
        history_limit=history_limit,
    )
