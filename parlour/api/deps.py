"""Dependencies resolving the components wired up by create_app()."""

from fastapi.requests import HTTPConnection

from parlour.api.v1.attendance.service import AttendanceService
from parlour.realtime.broadcaster import RealtimeBroadcaster


def get_broadcaster(conn: HTTPConnection) -> RealtimeBroadcaster:
    return conn.app.state.broadcaster


def get_attendance_service(conn: HTTPConnection) -> AttendanceService:
    return conn.app.state.attendance_service
