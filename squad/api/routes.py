"""
The HTTP surface of the API as one declarative table.

Each entry names a method, a path pattern, the role required to call it and the
handler. ``build_router`` turns the table into an ``APIRouter``; the role
becomes a guard dependency and path parameters are extracted by the router.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from fastapi import APIRouter, Depends, status

from squad.api.endpoints import attendance, auth, events, health, users
from squad.schemas import attendance_schemas, auth_schemas, event_schemas, user_schemas
from squad.services import auth_service


class Role(str, Enum):
    PUBLIC = "public"
    USER = "user"
    ADMIN = "admin"


ROLE_GUARDS = {
    Role.PUBLIC: None,
    Role.USER: auth_service.get_current_user,
    Role.ADMIN: auth_service.require_admin,
}


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    role: Role
    endpoint: Callable[..., Any]
    response_model: Optional[Any] = None
    status_code: int = status.HTTP_200_OK
    summary: Optional[str] = None


ROUTES: List[Route] = [
    Route("GET", "/health", Role.PUBLIC, health.health_check, summary="Health check"),
    Route("POST", "/auth/login", Role.PUBLIC, auth.login, auth_schemas.AuthResponse, summary="Log in with email and password"),
    Route(
        "POST", "/auth/register", Role.PUBLIC, auth.register, auth_schemas.AuthResponse,
        status_code=status.HTTP_201_CREATED, summary="Register a new player account",
    ),
    Route("GET", "/auth/me", Role.USER, auth.read_me, user_schemas.UserResponse, summary="Current user"),
    Route("GET", "/events", Role.USER, events.list_events, event_schemas.EventListResponse, summary="List events with attendances"),
    Route(
        "POST", "/events", Role.ADMIN, events.create_event, event_schemas.EventResponse,
        status_code=status.HTTP_201_CREATED, summary="Create an event",
    ),
    Route("PATCH", "/events/{event_id}", Role.ADMIN, events.update_event, event_schemas.EventResponse, summary="Update an event"),
    Route("DELETE", "/events/{event_id}", Role.ADMIN, events.delete_event, event_schemas.MessageResponse, summary="Delete an event"),
    Route(
        "GET", "/events/{event_id}/equipment", Role.USER, events.get_event_equipment,
        event_schemas.EquipmentSummaryResponse, summary="Who brings which equipment",
    ),
    Route(
        "POST", "/attendance/{event_id}", Role.USER, attendance.submit_attendance,
        attendance_schemas.AttendanceResponse, summary="Create or update own attendance",
    ),
    Route(
        "DELETE", "/attendance/{event_id}", Role.USER, attendance.delete_attendance,
        event_schemas.MessageResponse, summary="Withdraw own attendance",
    ),
    Route("GET", "/users", Role.USER, users.list_users, user_schemas.UserListResponse, summary="List users"),
    Route(
        "PATCH", "/users/{user_id}/status", Role.ADMIN, users.update_user_status,
        user_schemas.UserResponse, summary="Activate or deactivate a user",
    ),
    # Any OPTIONS request succeeds before auth or body parsing
    Route("OPTIONS", "/{path:path}", Role.PUBLIC, health.preflight, summary="CORS preflight"),
]


def build_router(routes: List[Route] = ROUTES) -> APIRouter:
    router = APIRouter()
    for route in routes:
        guard = ROLE_GUARDS[route.role]
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            response_model=route.response_model,
            status_code=route.status_code,
            summary=route.summary,
            dependencies=[Depends(guard)] if guard else None,
            include_in_schema=route.method != "OPTIONS",
        )
    return router
