# ============================================================
# Room Booking API Router
# ------------------------------------------------------------
# Expose les endpoints REST : salles, réservations, planning,
# utilisateurs et administration. Chaque endpoint attend un
# délai simulé (config.LATENCY_MS) avant de toucher au magasin.
# Les erreurs métier (errors.py) sont traduites en HTTP par app.py.
# ============================================================
import asyncio
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from roombooking import config
from roombooking.availability import week_schedule
from roombooking.db import get_session
from roombooking.models import (
    AdminStats, DaySchedule, Reservation, ReservationCreate, ReservationStatus, ReservationUpdate,
    ReviewRequest, Room, RoomCreate, RoomUpdate, SettingsUpdate, SystemSettings, User, UserCreate, UserUpdate,
)
from roombooking.repository import (
    BLOCKING_STATUSES, ReservationRepository, RoomRepository, SettingsRepository, UserRepository,
)

router = APIRouter()


async def simulate_latency(operation: str):
    delay = config.latency_seconds(operation)
    if delay > 0:
        await asyncio.sleep(delay)


# ------------------------------------------------------------
# Salles
# ------------------------------------------------------------
@router.get("/v1/rooms", response_model=List[Room])
async def list_rooms(
    search: Optional[str] = None,
    min_capacity: Optional[int] = None,
    max_capacity: Optional[int] = None,
    feature: Optional[str] = None,
    s: Session = Depends(get_session),
):
    await simulate_latency("list_rooms")
    return RoomRepository(s).list(search, min_capacity, max_capacity, feature)


@router.get("/v1/rooms/{room_id}", response_model=Room)
async def get_room(room_id: int, s: Session = Depends(get_session)):
    await simulate_latency("get_room")
    return RoomRepository(s).require(room_id)


@router.post("/v1/rooms", response_model=Room, status_code=201)
async def create_room(data: RoomCreate, s: Session = Depends(get_session)):
    await simulate_latency("write_room")
    return RoomRepository(s).create(data)


@router.patch("/v1/rooms/{room_id}", response_model=Room)
async def update_room(room_id: int, data: RoomUpdate, s: Session = Depends(get_session)):
    await simulate_latency("write_room")
    return RoomRepository(s).update(room_id, data)


@router.delete("/v1/rooms/{room_id}", status_code=204)
async def delete_room(room_id: int, s: Session = Depends(get_session)):
    await simulate_latency("write_room")
    RoomRepository(s).delete(room_id)
    return Response(status_code=204)


@router.get("/v1/rooms/{room_id}/reservations", response_model=List[Reservation])
async def list_room_reservations(room_id: int, s: Session = Depends(get_session)):
    await simulate_latency("list_room_reservations")
    return ReservationRepository(s).for_room(room_id)


# ------------------------------------------------------------
# GET /v1/rooms/{id}/schedule — 7 jours à partir de `start`
# ------------------------------------------------------------
# Seules les réservations pending / confirmed bloquent un créneau.
# ------------------------------------------------------------
@router.get("/v1/rooms/{room_id}/schedule", response_model=List[DaySchedule])
async def room_schedule(room_id: int, start: Optional[date] = None, s: Session = Depends(get_session)):
    await simulate_latency("room_schedule")
    repo = ReservationRepository(s)
    repo.rooms.require(room_id)
    blocking = repo.for_room(room_id, statuses=BLOCKING_STATUSES)
    return week_schedule(start or date.today(), room_id, blocking)


# ------------------------------------------------------------
# Réservations
# ------------------------------------------------------------
@router.get("/v1/reservations", response_model=List[Reservation])
async def list_reservations(status: Optional[ReservationStatus] = None, s: Session = Depends(get_session)):
    await simulate_latency("list_reservations")
    return ReservationRepository(s).list(status)


@router.get("/v1/reservations/{reservation_id}", response_model=Reservation)
async def get_reservation(reservation_id: int, s: Session = Depends(get_session)):
    await simulate_latency("get_reservation")
    return ReservationRepository(s).require(reservation_id)


@router.post("/v1/reservations", response_model=Reservation, status_code=201)
async def create_reservation(data: ReservationCreate, s: Session = Depends(get_session)):
    await simulate_latency("create_reservation")
    SettingsRepository(s).ensure_open()
    return ReservationRepository(s).create(data, user_id=config.CURRENT_USER_ID)


@router.patch("/v1/reservations/{reservation_id}", response_model=Reservation)
async def update_reservation(reservation_id: int, data: ReservationUpdate, s: Session = Depends(get_session)):
    await simulate_latency("update_reservation")
    SettingsRepository(s).ensure_open()
    return ReservationRepository(s).update(reservation_id, data)


@router.post("/v1/reservations/{reservation_id}/cancel")
async def cancel_reservation(reservation_id: int, s: Session = Depends(get_session)):
    await simulate_latency("cancel_reservation")
    SettingsRepository(s).ensure_open()
    reservation = ReservationRepository(s).cancel(reservation_id)
    return {"id": reservation.id, "status": reservation.status}


# Approbation / refus : actions admin, disponibles même en maintenance
@router.post("/v1/reservations/{reservation_id}/approve", response_model=Reservation)
async def approve_reservation(reservation_id: int, review: Optional[ReviewRequest] = None,
                              s: Session = Depends(get_session)):
    await simulate_latency("update_reservation")
    notes = review.admin_notes if review else None
    return ReservationRepository(s).approve(reservation_id, notes)


@router.post("/v1/reservations/{reservation_id}/reject", response_model=Reservation)
async def reject_reservation(reservation_id: int, review: Optional[ReviewRequest] = None,
                             s: Session = Depends(get_session)):
    await simulate_latency("update_reservation")
    notes = review.admin_notes if review else None
    return ReservationRepository(s).reject(reservation_id, notes)


# ------------------------------------------------------------
# Utilisateurs — /me avant /{user_id} pour l'ordre de routage
# ------------------------------------------------------------
@router.get("/v1/users", response_model=List[User])
async def list_users(s: Session = Depends(get_session)):
    await simulate_latency("list_users")
    return UserRepository(s).list()


@router.get("/v1/users/me", response_model=User)
async def current_user(s: Session = Depends(get_session)):
    await simulate_latency("current_user")
    return UserRepository(s).require(config.CURRENT_USER_ID)


@router.get("/v1/users/me/reservations", response_model=List[Reservation])
async def my_reservations(s: Session = Depends(get_session)):
    await simulate_latency("list_reservations")
    return ReservationRepository(s).for_user(config.CURRENT_USER_ID)


@router.get("/v1/users/{user_id}", response_model=User)
async def get_user(user_id: str, s: Session = Depends(get_session)):
    await simulate_latency("list_users")
    return UserRepository(s).require(user_id)


@router.post("/v1/users", response_model=User, status_code=201)
async def create_user(data: UserCreate, s: Session = Depends(get_session)):
    await simulate_latency("write_user")
    return UserRepository(s).create(data)


@router.patch("/v1/users/{user_id}", response_model=User)
async def update_user(user_id: str, data: UserUpdate, s: Session = Depends(get_session)):
    await simulate_latency("write_user")
    return UserRepository(s).update(user_id, data)


@router.delete("/v1/users/{user_id}", status_code=204)
async def delete_user(user_id: str, s: Session = Depends(get_session)):
    await simulate_latency("write_user")
    UserRepository(s).delete(user_id)
    return Response(status_code=204)


# ------------------------------------------------------------
# Administration
# ------------------------------------------------------------
@router.get("/v1/admin/stats", response_model=AdminStats)
async def admin_stats(s: Session = Depends(get_session)):
    await simulate_latency("admin")
    return ReservationRepository(s).stats()


@router.get("/v1/admin/settings", response_model=SystemSettings)
async def get_settings(s: Session = Depends(get_session)):
    await simulate_latency("admin")
    return SettingsRepository(s).get()


@router.patch("/v1/admin/settings", response_model=SystemSettings)
async def update_settings(data: SettingsUpdate, s: Session = Depends(get_session)):
    await simulate_latency("admin")
    return SettingsRepository(s).update(data)
