# ============================================================
# models.py — Modèles de données SQLModel (Room Booking)
# ------------------------------------------------------------
# Définit les entités stockées et les schémas d'échange :
#   1️. Room : une salle de réunion
#   2️. Reservation : une réservation de salle
#   3️. User : un utilisateur (identité fixe pour la démo)
#   4️. SystemSettings : les interrupteurs de l'administration
#   + schémas Create/Update et vues calculées (TimeSlot, DaySchedule)
# ============================================================
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


# ------------------------------------------------------------
# Room
# ------------------------------------------------------------
# Une salle : capacité, emplacement, équipements (liste ordonnée).
# is_available=None compte comme disponible ; False = salle désactivée
# par un admin.
# sqlite_autoincrement : les ids ne sont jamais réutilisés après suppression
# ------------------------------------------------------------
class RoomBase(SQLModel):
    name: str
    capacity: int = Field(gt=0)
    location: str
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    image: Optional[str] = None
    is_available: Optional[bool] = True


class Room(RoomBase, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(SQLModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    location: Optional[str] = None
    features: Optional[List[str]] = None
    image: Optional[str] = None
    is_available: Optional[bool] = None


# ------------------------------------------------------------
# Reservation
# ------------------------------------------------------------
# Cycle de vie : PENDING → CONFIRMED → CANCELLED
#                PENDING → REJECTED
# Le statut initial est décidé par le service (auto_approve), jamais
# par l'appelant.
# ------------------------------------------------------------
class ReservationBase(SQLModel):
    room_id: int = Field(index=True)
    user_id: str = Field(index=True)
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: Optional[int] = None


class Reservation(ReservationBase, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    status: ReservationStatus = ReservationStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    admin_notes: Optional[str] = None


class ReservationCreate(SQLModel):
    room_id: int
    # si absent on prend l'utilisateur courant
    user_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: Optional[int] = None


class ReservationUpdate(SQLModel):
    room_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    attendees: Optional[int] = None
    status: Optional[ReservationStatus] = None
    admin_notes: Optional[str] = None


class ReviewRequest(SQLModel):
    admin_notes: Optional[str] = None


# ------------------------------------------------------------
# User
# ------------------------------------------------------------
class UserBase(SQLModel):
    name: str
    email: str
    department: Optional[str] = None
    is_admin: Optional[bool] = False


class User(UserBase, table=True):
    id: str = Field(primary_key=True)


class UserCreate(UserBase):
    pass


class UserUpdate(SQLModel):
    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    is_admin: Optional[bool] = None


# ------------------------------------------------------------
# SystemSettings — une seule ligne (id=1)
# ------------------------------------------------------------
class SystemSettings(SQLModel, table=True):
    id: Optional[int] = Field(default=1, primary_key=True)
    auto_approve: bool = False
    email_notifications: bool = True
    maintenance_mode: bool = False


class SettingsUpdate(SQLModel):
    auto_approve: Optional[bool] = None
    email_notifications: Optional[bool] = None
    maintenance_mode: Optional[bool] = None


# ------------------------------------------------------------
# Vues calculées (pas de table)
# ------------------------------------------------------------
class TimeSlot(SQLModel):
    time: datetime
    available: bool
    reservation: Optional[Reservation] = None


class DaySchedule(SQLModel):
    date: date
    time_slots: List[TimeSlot]


class AdminStats(SQLModel):
    total_rooms: int
    available_rooms: int
    pending_reservations: int
    confirmed_reservations: int
    cancelled_reservations: int
