# ============================================================
# ui.py — Interface web (FastAPI + Jinja2)
# ------------------------------------------------------------
# Pages HTML minimales au-dessus des mêmes repositories que l'API :
#  - liste des salles (filtres) et détail avec planning de la semaine
#  - formulaire de réservation, "mes réservations" + annulation
#  - administration : tableau de bord, salles, réservations, réglages
# Les erreurs métier sont affichées dans un bandeau de notification.
# ============================================================
import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlmodel import Session

from roombooking import config
from roombooking.availability import week_schedule
from roombooking.db import get_session
from roombooking.errors import RoomBookingError, ValidationError
from roombooking.models import ReservationCreate, ReservationStatus, RoomCreate, RoomUpdate, SettingsUpdate
from roombooking.repository import (
    BLOCKING_STATUSES, ReservationRepository, RoomRepository, SettingsRepository, UserRepository,
)

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()

# Tranches de capacité proposées dans le filtre de la liste des salles
CAPACITY_RANGES = {"1-5": (1, 5), "6-10": (6, 10), "11-20": (11, 20), "21+": (21, None)}


def _fmt(dt, pattern="%Y-%m-%d %H:%M"):
    return dt.strftime(pattern) if dt else ""


templates.env.filters["fmt"] = _fmt


def _render(request: Request, name: str, s: Session, notice=None, **context):
    context.update(
        notice=notice,
        current_user=UserRepository(s).get(config.CURRENT_USER_ID),
        settings=SettingsRepository(s).get(),
    )
    return templates.TemplateResponse(request, name, context)


# Exécute une action et renvoie le bandeau correspondant (succès ou message d'erreur)
def _attempt(action, success: str):
    try:
        action()
    except RoomBookingError as e:
        logger.warning("ui action failed: %s", e.message)
        return {"kind": "error", "text": e.message}
    return {"kind": "success", "text": success}


@router.get("/", include_in_schema=False)
def root():
    return RedirectResponse("/ui")


# ------------------------------------------------------------
# Salles
# ------------------------------------------------------------
@router.get("/ui", response_class=HTMLResponse)
def ui_rooms(
    request: Request,
    search: str = "",
    capacity: str = "all",
    feature: str = "all",
    s: Session = Depends(get_session),
):
    low, high = CAPACITY_RANGES.get(capacity, (None, None))
    repo = RoomRepository(s)
    rooms = repo.list(search or None, low, high, None if feature == "all" else feature)
    all_features = sorted({f for room in repo.list() for f in room.features or []})
    return _render(
        request, "rooms.html", s,
        rooms=rooms, features=all_features, capacity_ranges=list(CAPACITY_RANGES),
        filters={"search": search, "capacity": capacity, "feature": feature},
    )


def _room_page(request: Request, s: Session, room_id: int, start: Optional[date], notice=None):
    reservations = ReservationRepository(s)
    room = reservations.rooms.require(room_id)
    start = start or date.today()
    schedule = week_schedule(start, room_id, reservations.for_room(room_id, statuses=BLOCKING_STATUSES))
    upcoming = [
        r for r in reservations.for_room(room_id, statuses=[ReservationStatus.CONFIRMED])
        if r.end_time >= datetime.now()
    ]
    return _render(
        request, "room_detail.html", s, notice=notice,
        room=room, schedule=schedule, upcoming=upcoming, start=start,
        previous_week=start - timedelta(days=7), next_week=start + timedelta(days=7),
        hours=list(range(config.BUSINESS_START_HOUR, config.BUSINESS_END_HOUR + 1)),
    )


# Salle inconnue : on retombe sur la liste avec le message d'erreur
def _room_or_list_page(request: Request, s: Session, room_id: int, start: Optional[date], notice=None):
    try:
        return _room_page(request, s, room_id, start, notice)
    except RoomBookingError as e:
        return _render(request, "rooms.html", s, notice={"kind": "error", "text": e.message},
                       rooms=[], features=[], capacity_ranges=list(CAPACITY_RANGES),
                       filters={"search": "", "capacity": "all", "feature": "all"})


@router.get("/ui/rooms/{room_id}", response_class=HTMLResponse)
def ui_room_detail(request: Request, room_id: int, start: Optional[date] = None, s: Session = Depends(get_session)):
    return _room_or_list_page(request, s, room_id, start)


# Création d'une réservation via le formulaire HTML
# On reconstruit start/end à partir du jour, de l'heure et de la durée.
@router.post("/ui/rooms/{room_id}/reserve", response_class=HTMLResponse)
def ui_reserve(
    request: Request,
    room_id: int,
    day: date = Form(...),
    start_hour: int = Form(...),
    duration: int = Form(1),
    title: str = Form(...),
    description: str = Form(""),
    attendees: int = Form(1),
    s: Session = Depends(get_session),
):
    def create():
        SettingsRepository(s).ensure_open()
        # la fin doit rester dans la journée de début
        if not 0 <= start_hour <= 23 or not 1 <= duration <= 23 - start_hour:
            raise ValidationError("invalid start time or duration")
        start = datetime.combine(day, time(start_hour))
        ReservationRepository(s).create(ReservationCreate(
            room_id=room_id,
            user_id=config.CURRENT_USER_ID,
            title=title,
            description=description or None,
            start_time=start,
            end_time=start + timedelta(hours=duration),
            attendees=attendees,
        ))

    notice = _attempt(create, "Reservation request submitted")
    return _room_or_list_page(request, s, room_id, day, notice)


# ------------------------------------------------------------
# Mes réservations
# ------------------------------------------------------------
def _my_reservations_page(request: Request, s: Session, notice=None):
    reservations = ReservationRepository(s)
    mine = reservations.for_user(config.CURRENT_USER_ID)
    now = datetime.now()
    rooms = {room.id: room for room in reservations.rooms.list()}
    return _render(
        request, "reservations.html", s, notice=notice, rooms=rooms,
        upcoming=[r for r in mine if r.status == ReservationStatus.CONFIRMED and r.start_time > now],
        pending=[r for r in mine if r.status == ReservationStatus.PENDING],
        past=[r for r in mine if r.status == ReservationStatus.CONFIRMED and r.start_time <= now],
        cancelled=[r for r in mine if r.status in (ReservationStatus.CANCELLED, ReservationStatus.REJECTED)],
    )


@router.get("/ui/reservations", response_class=HTMLResponse)
def ui_reservations(request: Request, s: Session = Depends(get_session)):
    return _my_reservations_page(request, s)


@router.post("/ui/reservations/{reservation_id}/cancel", response_class=HTMLResponse)
def ui_cancel(request: Request, reservation_id: int, s: Session = Depends(get_session)):
    def cancel():
        SettingsRepository(s).ensure_open()
        ReservationRepository(s).cancel(reservation_id)

    notice = _attempt(cancel, "Reservation cancelled successfully")
    return _my_reservations_page(request, s, notice)


# ------------------------------------------------------------
# Administration
# ------------------------------------------------------------
@router.get("/ui/admin", response_class=HTMLResponse)
def ui_admin(request: Request, s: Session = Depends(get_session)):
    reservations = ReservationRepository(s)
    rooms = {room.id: room for room in reservations.rooms.list()}
    return _render(
        request, "admin/dashboard.html", s,
        stats=reservations.stats(), rooms=rooms,
        pending=reservations.list(ReservationStatus.PENDING)[:5],
    )


def _admin_rooms_page(request: Request, s: Session, notice=None):
    return _render(request, "admin/rooms.html", s, notice=notice, rooms=RoomRepository(s).list())


@router.get("/ui/admin/rooms", response_class=HTMLResponse)
def ui_admin_rooms(request: Request, s: Session = Depends(get_session)):
    return _admin_rooms_page(request, s)


@router.post("/ui/admin/rooms", response_class=HTMLResponse)
def ui_admin_create_room(
    request: Request,
    name: str = Form(...),
    capacity: int = Form(...),
    location: str = Form(...),
    features: str = Form(""),
    image: str = Form(""),
    s: Session = Depends(get_session),
):
    # équipements saisis séparés par des virgules
    labels = [f.strip() for f in features.split(",") if f.strip()]
    if capacity < 1:
        notice = {"kind": "error", "text": "capacity must be a positive number"}
    else:
        data = RoomCreate(name=name, capacity=capacity, location=location, features=labels, image=image or None)
        notice = _attempt(lambda: RoomRepository(s).create(data), "Room created successfully")
    return _admin_rooms_page(request, s, notice)


@router.post("/ui/admin/rooms/{room_id}/toggle", response_class=HTMLResponse)
def ui_admin_toggle_room(request: Request, room_id: int, s: Session = Depends(get_session)):
    repo = RoomRepository(s)

    def toggle():
        room = repo.require(room_id)
        repo.update(room_id, RoomUpdate(is_available=room.is_available is False))

    notice = _attempt(toggle, "Room availability updated")
    return _admin_rooms_page(request, s, notice)


@router.post("/ui/admin/rooms/{room_id}/delete", response_class=HTMLResponse)
def ui_admin_delete_room(request: Request, room_id: int, s: Session = Depends(get_session)):
    notice = _attempt(lambda: RoomRepository(s).delete(room_id), "Room deleted successfully")
    return _admin_rooms_page(request, s, notice)


def _admin_reservations_page(request: Request, s: Session, notice=None):
    reservations = ReservationRepository(s)
    everything = reservations.list()
    return _render(
        request, "admin/reservations.html", s, notice=notice,
        rooms={room.id: room for room in reservations.rooms.list()},
        pending=[r for r in everything if r.status == ReservationStatus.PENDING],
        confirmed=[r for r in everything if r.status == ReservationStatus.CONFIRMED],
        closed=[r for r in everything if r.status in (ReservationStatus.CANCELLED, ReservationStatus.REJECTED)],
    )


@router.get("/ui/admin/reservations", response_class=HTMLResponse)
def ui_admin_reservations(request: Request, s: Session = Depends(get_session)):
    return _admin_reservations_page(request, s)


@router.post("/ui/admin/reservations/{reservation_id}/approve", response_class=HTMLResponse)
def ui_admin_approve(request: Request, reservation_id: int, admin_notes: str = Form(""),
                     s: Session = Depends(get_session)):
    notice = _attempt(lambda: ReservationRepository(s).approve(reservation_id, admin_notes or None),
                      "Reservation approved successfully")
    return _admin_reservations_page(request, s, notice)


@router.post("/ui/admin/reservations/{reservation_id}/reject", response_class=HTMLResponse)
def ui_admin_reject(request: Request, reservation_id: int, admin_notes: str = Form(""),
                    s: Session = Depends(get_session)):
    notice = _attempt(lambda: ReservationRepository(s).reject(reservation_id, admin_notes or None),
                      "Reservation rejected")
    return _admin_reservations_page(request, s, notice)


@router.get("/ui/admin/settings", response_class=HTMLResponse)
def ui_admin_settings(request: Request, s: Session = Depends(get_session)):
    return _render(request, "admin/settings.html", s)


# Les cases non cochées ne sont pas envoyées par le navigateur
@router.post("/ui/admin/settings", response_class=HTMLResponse)
def ui_admin_save_settings(
    request: Request,
    auto_approve: bool = Form(False),
    email_notifications: bool = Form(False),
    maintenance_mode: bool = Form(False),
    s: Session = Depends(get_session),
):
    SettingsRepository(s).update(SettingsUpdate(
        auto_approve=auto_approve,
        email_notifications=email_notifications,
        maintenance_mode=maintenance_mode,
    ))
    return _render(request, "admin/settings.html", s, notice={"kind": "success", "text": "Settings saved"})
