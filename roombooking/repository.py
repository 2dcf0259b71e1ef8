# ============================================================
# repository.py — Accès aux données
# ------------------------------------------------------------
# Design pattern "Repository" : une classe par collection, toutes
# construites sur la même Session (le magasin partagé). Les routes
# FastAPI et l'UI passent uniquement par ici.
#
# Erreurs : NotFoundError pour un id inconnu, ConflictError quand une
# règle métier bloque (salle utilisée, chevauchement, ...).
# ============================================================
import logging
import uuid
from collections import Counter
from datetime import datetime, time, timedelta
from typing import List, Optional

from sqlmodel import Session, select

from roombooking import config
from roombooking.errors import ConflictError, MaintenanceError, NotFoundError, ValidationError
from roombooking.models import (
    AdminStats, Reservation, ReservationCreate, ReservationStatus, ReservationUpdate,
    Room, RoomCreate, RoomUpdate, SettingsUpdate, SystemSettings, User, UserCreate, UserUpdate,
)
from roombooking.transitions import apply_status

logger = logging.getLogger(__name__)

# statuts qui occupent réellement une salle
BLOCKING_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


# On ramène un datetime avec timezone en heure locale "naïve"
def to_local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(config.LOCAL_TZ).replace(tzinfo=None)


def _merge(record, changes: dict):
    # fusion superficielle des champs fournis
    for key, value in changes.items():
        setattr(record, key, value)
    return record


class RoomRepository:
    def __init__(self, session: Session):
        self.session = session

    def list(self, search: Optional[str] = None, min_capacity: Optional[int] = None,
             max_capacity: Optional[int] = None, feature: Optional[str] = None) -> List[Room]:
        rooms = self.session.exec(select(Room).order_by(Room.id)).all()
        if search:
            term = search.lower()
            rooms = [r for r in rooms if term in r.name.lower() or term in r.location.lower()]
        if min_capacity is not None:
            rooms = [r for r in rooms if r.capacity >= min_capacity]
        if max_capacity is not None:
            rooms = [r for r in rooms if r.capacity <= max_capacity]
        if feature:
            rooms = [r for r in rooms if feature in (r.features or [])]
        return rooms

    def get(self, room_id: int) -> Optional[Room]:
        return self.session.get(Room, room_id)

    def require(self, room_id: int) -> Room:
        room = self.get(room_id)
        if not room:
            raise NotFoundError(f"room {room_id} not found")
        return room

    def create(self, data: RoomCreate) -> Room:
        room = Room.model_validate(data)
        self.session.add(room)
        self.session.commit()
        self.session.refresh(room)
        logger.info("room %s created (%s)", room.id, room.name)
        return room

    def update(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.require(room_id)
        _merge(room, data.model_dump(exclude_unset=True))
        self.session.add(room)
        self.session.commit()
        self.session.refresh(room)
        logger.info("room %s updated", room_id)
        return room

    def delete(self, room_id: int) -> None:
        room = self.require(room_id)
        # une salle avec des réservations confirmées ne peut pas disparaître
        active = self.session.exec(
            select(Reservation)
            .where(Reservation.room_id == room_id)
            .where(Reservation.status == ReservationStatus.CONFIRMED)
        ).first()
        if active:
            raise ConflictError(f"room {room_id} has confirmed reservations")
        # les demandes encore en attente sont refusées avec la salle
        pending = self.session.exec(
            select(Reservation)
            .where(Reservation.room_id == room_id)
            .where(Reservation.status == ReservationStatus.PENDING)
        ).all()
        for reservation in pending:
            reservation.status = ReservationStatus.REJECTED
            reservation.admin_notes = "room deleted"
            self.session.add(reservation)
        self.session.delete(room)
        self.session.commit()
        logger.info("room %s deleted (%d pending requests rejected)", room_id, len(pending))


class SettingsRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self) -> SystemSettings:
        settings = self.session.get(SystemSettings, 1)
        if settings is None:
            settings = SystemSettings(id=1)
            self.session.add(settings)
            self.session.commit()
            self.session.refresh(settings)
        return settings

    def update(self, data: SettingsUpdate) -> SystemSettings:
        settings = _merge(self.get(), data.model_dump(exclude_unset=True))
        self.session.add(settings)
        self.session.commit()
        self.session.refresh(settings)
        logger.info("settings updated: auto_approve=%s email_notifications=%s maintenance_mode=%s",
                    settings.auto_approve, settings.email_notifications, settings.maintenance_mode)
        return settings

    def ensure_open(self) -> None:
        if self.get().maintenance_mode:
            raise MaintenanceError()


class ReservationRepository:
    def __init__(self, session: Session):
        self.session = session
        self.rooms = RoomRepository(session)
        self.settings = SettingsRepository(session)

    def list(self, status: Optional[ReservationStatus] = None) -> List[Reservation]:
        query = select(Reservation).order_by(Reservation.id)
        if status is not None:
            query = query.where(Reservation.status == status)
        return self.session.exec(query).all()

    def for_room(self, room_id: int, statuses=None) -> List[Reservation]:
        query = select(Reservation).where(Reservation.room_id == room_id)
        if statuses:
            query = query.where(Reservation.status.in_(statuses))
        return self.session.exec(query.order_by(Reservation.start_time)).all()

    def for_user(self, user_id: str) -> List[Reservation]:
        return self.session.exec(
            select(Reservation).where(Reservation.user_id == user_id).order_by(Reservation.start_time)
        ).all()

    def get(self, reservation_id: int) -> Optional[Reservation]:
        return self.session.get(Reservation, reservation_id)

    def require(self, reservation_id: int) -> Reservation:
        reservation = self.get(reservation_id)
        if not reservation:
            raise NotFoundError(f"reservation {reservation_id} not found")
        return reservation

    # --------------------------------------------------------
    # Règles métier
    # --------------------------------------------------------
    def _check_times(self, start: datetime, end: datetime) -> None:
        if start >= end:
            raise ValidationError("start must be before end")
        # dernier créneau à BUSINESS_END_HOUR, il se termine une heure après
        opening = datetime.combine(start.date(), time(config.BUSINESS_START_HOUR))
        closing = datetime.combine(start.date(), time(0)) + timedelta(hours=config.BUSINESS_END_HOUR + 1)
        if start < opening or end > closing:
            raise ValidationError(
                f"reservation must be within business hours "
                f"({opening:%H:%M}-{closing:%H:%M})"
            )

    def conflicts(self, room_id: int, start: datetime, end: datetime, exclude_id: Optional[int] = None) -> List[Reservation]:
        confirmed = self.for_room(room_id, statuses=[ReservationStatus.CONFIRMED])
        return [
            r for r in confirmed
            if r.id != exclude_id and r.start_time < end and start < r.end_time
        ]

    def _check_no_overlap(self, reservation: Reservation) -> None:
        clash = self.conflicts(reservation.room_id, reservation.start_time, reservation.end_time,
                               exclude_id=reservation.id)
        if clash:
            raise ConflictError(
                f"room {reservation.room_id} is already booked from "
                f"{clash[0].start_time:%H:%M} to {clash[0].end_time:%H:%M} ({clash[0].title})"
            )

    def _check_room_open(self, room_id: int) -> Room:
        room = self.rooms.require(room_id)
        if room.is_available is False:
            raise ConflictError(f"room {room_id} is not available for booking")
        return room

    @staticmethod
    def _check_details(title: Optional[str], attendees: Optional[int]) -> None:
        if title is not None and len(title.strip()) < 3:
            raise ValidationError("title must be at least 3 characters")
        if attendees is not None and not 1 <= attendees <= 100:
            raise ValidationError("attendees must be between 1 and 100")

    # --------------------------------------------------------
    # CRUD
    # --------------------------------------------------------
    def create(self, data: ReservationCreate, user_id: Optional[str] = None) -> Reservation:
        start, end = to_local_naive(data.start_time), to_local_naive(data.end_time)
        self._check_times(start, end)
        self._check_room_open(data.room_id)
        self._check_details(data.title, data.attendees)

        reservation = Reservation(
            room_id=data.room_id,
            user_id=data.user_id or user_id or config.CURRENT_USER_ID,
            title=data.title.strip(),
            description=data.description,
            start_time=start,
            end_time=end,
            attendees=data.attendees,
            created_at=datetime.now(),
        )
        # statut initial unique : pending, sauf si l'admin a activé l'auto-approbation
        if self.settings.get().auto_approve:
            self._check_no_overlap(reservation)
            reservation.status = ReservationStatus.CONFIRMED

        self.session.add(reservation)
        self.session.commit()
        self.session.refresh(reservation)
        logger.info("reservation %s created for room %s (%s)", reservation.id, reservation.room_id,
                    reservation.status.value)
        return reservation

    def update(self, reservation_id: int, data: ReservationUpdate) -> Reservation:
        reservation = self.require(reservation_id)
        changes = data.model_dump(exclude_unset=True)
        target = changes.pop("status", None)
        # ces champs sont obligatoires : un null explicite est ignoré
        for key in ("room_id", "title", "start_time", "end_time"):
            if key in changes and changes[key] is None:
                del changes[key]

        for key in ("start_time", "end_time"):
            if key in changes:
                changes[key] = to_local_naive(changes[key])
        start = changes.get("start_time", reservation.start_time)
        end = changes.get("end_time", reservation.end_time)
        if "start_time" in changes or "end_time" in changes:
            self._check_times(start, end)
        self._check_details(changes.get("title"), changes.get("attendees"))
        if "title" in changes:
            changes["title"] = changes["title"].strip()

        # on valide sur une copie avant de toucher l'objet en session
        candidate = Reservation.model_validate(reservation.model_dump())
        _merge(candidate, changes)
        changed = target is not None and apply_status(candidate, target)
        confirming = changed and candidate.status == ReservationStatus.CONFIRMED
        # la salle doit encore exister et être ouverte quand on la change ou qu'on confirme
        if confirming or changes.get("room_id") not in (None, reservation.room_id):
            self._check_room_open(candidate.room_id)
        if candidate.status == ReservationStatus.CONFIRMED:
            self._check_no_overlap(candidate)

        _merge(reservation, changes)
        if target is not None:
            reservation.status = candidate.status
        self.session.add(reservation)
        self.session.commit()
        self.session.refresh(reservation)
        logger.info("reservation %s updated (%s)", reservation_id, reservation.status.value)
        return reservation

    def set_status(self, reservation_id: int, status: ReservationStatus, admin_notes: Optional[str] = None) -> Reservation:
        changes = {"status": status}
        if admin_notes is not None:
            changes["admin_notes"] = admin_notes
        return self.update(reservation_id, ReservationUpdate(**changes))

    def approve(self, reservation_id: int, admin_notes: Optional[str] = None) -> Reservation:
        return self.set_status(reservation_id, ReservationStatus.CONFIRMED, admin_notes)

    def reject(self, reservation_id: int, admin_notes: Optional[str] = None) -> Reservation:
        return self.set_status(reservation_id, ReservationStatus.REJECTED, admin_notes)

    def cancel(self, reservation_id: int) -> Reservation:
        return self.set_status(reservation_id, ReservationStatus.CANCELLED)

    def stats(self) -> AdminStats:
        rooms = self.rooms.list()
        reservations = self.list()
        counts = Counter(ReservationStatus(r.status) for r in reservations)
        return AdminStats(
            total_rooms=len(rooms),
            available_rooms=sum(1 for r in rooms if r.is_available is not False),
            pending_reservations=counts[ReservationStatus.PENDING],
            confirmed_reservations=counts[ReservationStatus.CONFIRMED],
            cancelled_reservations=counts[ReservationStatus.CANCELLED] + counts[ReservationStatus.REJECTED],
        )


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def list(self) -> List[User]:
        return self.session.exec(select(User).order_by(User.name)).all()

    def get(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def require(self, user_id: str) -> User:
        user = self.get(user_id)
        if not user:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def create(self, data: UserCreate) -> User:
        # identifiant aléatoire : indépendant de la taille de la collection
        user = User(id=uuid.uuid4().hex[:12], **data.model_dump())
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("user %s created (%s)", user.id, user.email)
        return user

    def update(self, user_id: str, data: UserUpdate) -> User:
        user = _merge(self.require(user_id), data.model_dump(exclude_unset=True))
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("user %s updated", user_id)
        return user

    def delete(self, user_id: str) -> None:
        user = self.require(user_id)
        self.session.delete(user)
        self.session.commit()
        logger.info("user %s deleted", user_id)
