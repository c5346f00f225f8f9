"""
Server-rendered pages: dashboard grid, attendance form and admin panels.

Pages authenticate with the same signed token the API uses, kept in an
HTTP-only cookie, and call the service layer directly.
"""

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db, get_settings_dependency
from squad.core.config import Settings
from squad.models.user import User
from squad.schemas import attendance_schemas, event_schemas, user_schemas
from squad.services import attendance_service, auth_service, event_service, user_service
from squad.web import grid

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    equipment_types=grid.EQUIPMENT_TYPES,
    equipment_labels=grid.EQUIPMENT_LABELS,
    equipment_icons=grid.EQUIPMENT_ICONS,
    max_additional_players=grid.MAX_ADDITIONAL_PLAYERS,
)

router = APIRouter(include_in_schema=False)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    if isinstance(exc, ValidationError):
        return "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
    return str(exc)


def _events_json(db: Session) -> List[dict]:
    return [event.model_dump(mode="json") for event in event_service.list_events_with_totals(db)]


def _users_json(db: Session) -> List[dict]:
    return [user_schemas.UserListItem.model_validate(u).model_dump(mode="json") for u in user_service.list_users(db)]


def _event_json(db: Session, event_id: str) -> Optional[dict]:
    for event in _events_json(db):
        if event["id"] == event_id:
            return event
    return None


@router.get("/login")
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"error": None, "email": ""})


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = auth_service.authenticate(db, email, password)
    if user is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid credentials", "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = _redirect("/")
    response.set_cookie(
        settings.token_cookie_name,
        auth_service.issue_token(user, settings),
        max_age=settings.access_token_expire_days * 24 * 3600,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/logout")
def logout(settings: Settings = Depends(get_settings_dependency)):
    response = _redirect("/login")
    response.delete_cookie(settings.token_cookie_name)
    return response


@router.get("/")
def dashboard(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = auth_service.get_cookie_user(request, db, settings)
    if user is None:
        return _redirect("/login")

    events = _events_json(db)
    rows = grid.build_grid(events, _users_json(db), viewer_id=user.id)
    return templates.TemplateResponse(
        request, "dashboard.html", {"current_user": user, "events": events, "rows": rows}
    )


def _render_attendance_form(request: Request, user: User, event: dict, values: dict, error: Optional[str] = None):
    return templates.TemplateResponse(
        request,
        "attendance_form.html",
        {"current_user": user, "event": event, "form": values, "error": error},
        status_code=status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
    )


@router.get("/events/{event_id}/attendance")
def attendance_form(
    event_id: str,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = auth_service.get_cookie_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    event = _event_json(db, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return _render_attendance_form(request, user, event, grid.attendance_form_defaults(event, user.id))


@router.post("/events/{event_id}/attendance")
def attendance_submit(
    event_id: str,
    request: Request,
    status_value: str = Form(..., alias="status"),
    additional_players: int = Form(0),
    comment: str = Form(""),
    equipment: List[str] = Form(default=[]),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = auth_service.get_cookie_user(request, db, settings)
    if user is None:
        return _redirect("/login")

    confirmed = status_value == attendance_schemas.AttendanceStatus.CONFIRMED.value
    try:
        submission = attendance_schemas.AttendanceSubmit(
            status=status_value,
            additional_players=min(additional_players, grid.MAX_ADDITIONAL_PLAYERS) if confirmed else 0,
            comment=comment.strip() or None,
            equipment=equipment if confirmed else [],
        )
        attendance_service.upsert_attendance(db, user, event_id, submission)
    except (ValidationError, HTTPException) as exc:
        event = _event_json(db, event_id)
        if event is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        values = {
            "exists": grid.find_attendance(event, user.id) is not None,
            "status": status_value,
            "additional_players": additional_players,
            "comment": comment,
            "equipment": equipment,
        }
        return _render_attendance_form(request, user, event, values, error=_error_message(exc))
    return _redirect("/")


@router.post("/events/{event_id}/attendance/delete")
def attendance_delete(
    event_id: str,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = auth_service.get_cookie_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    attendance_service.delete_attendance(db, user, event_id)
    return _redirect("/")


def _admin_user(request: Request, db: Session, settings: Settings) -> Optional[User]:
    user = auth_service.get_cookie_user(request, db, settings)
    if user is not None and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def _render_admin(
    request: Request,
    db: Session,
    user: User,
    event_id: Optional[str] = None,
    error: Optional[str] = None,
):
    events = _events_json(db)
    roster = event_service.equipment_summary(db, event_id) if event_id else None
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "current_user": user,
            "events": events,
            "users": _users_json(db),
            "selected_event_id": event_id,
            "roster": roster,
            "error": error,
        },
        status_code=status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
    )


@router.get("/admin")
def admin_page(
    request: Request,
    event_id: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = _admin_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    return _render_admin(request, db, user, event_id=event_id or None)


@router.post("/admin/events")
def admin_create_event(
    request: Request,
    title: str = Form(...),
    date: str = Form(...),
    time_from: str = Form(...),
    time_to: str = Form(...),
    location: str = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = _admin_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    try:
        event_in = event_schemas.EventCreate(
            title=title, date=date, time_from=time_from, time_to=time_to, location=location
        )
    except ValidationError as exc:
        return _render_admin(request, db, user, error=_error_message(exc))
    event_service.create_event(db, event_in, creator_id=user.id)
    return _redirect("/admin")


@router.post("/admin/events/{event_id}/delete")
def admin_delete_event(
    event_id: str,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = _admin_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    event_service.delete_event(db, event_id)
    return _redirect("/admin")


@router.post("/admin/users/{user_id}/status")
def admin_toggle_user(
    user_id: str,
    request: Request,
    is_active: bool = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    user = _admin_user(request, db, settings)
    if user is None:
        return _redirect("/login")
    try:
        user_service.set_user_status(db, user_id, is_active)
    except HTTPException as exc:
        return _render_admin(request, db, user, error=_error_message(exc))
    return _redirect("/admin")
