# ============================================================
# seed.py — Données de démonstration
# ------------------------------------------------------------
# 4 salles, 2 utilisateurs, 3 réservations confirmées placées
# par rapport à aujourd'hui. Chargées seulement si la base est vide.
# ============================================================
import logging
from datetime import datetime, time, timedelta

from sqlmodel import Session, select

from roombooking.models import Reservation, ReservationStatus, Room, SystemSettings, User

logger = logging.getLogger(__name__)

ROOMS = [
    {
        "name": "Executive Suite",
        "capacity": 12,
        "location": "Building A, Floor 3",
        "features": ["Projector", "Video conferencing", "Whiteboard", "Coffee machine"],
        "image": "https://images.unsplash.com/photo-1517502884422-41eaead166d4?q=80&w=500&auto=format&fit=crop",
    },
    {
        "name": "Brainstorm Room",
        "capacity": 6,
        "location": "Building B, Floor 2",
        "features": ["Whiteboard", "TV Screen", "Standing desks"],
        "image": "https://images.unsplash.com/photo-1497366754035-f200968a6e72?q=80&w=500&auto=format&fit=crop",
    },
    {
        "name": "Conference Hall",
        "capacity": 30,
        "location": "Building A, Floor 1",
        "features": ["Projector", "Sound system", "Video conferencing", "Podium"],
        "image": "https://images.unsplash.com/photo-1517457373958-b7bdd4587205?q=80&w=500&auto=format&fit=crop",
    },
    {
        "name": "Focus Room",
        "capacity": 4,
        "location": "Building C, Floor 2",
        "features": ["Whiteboard", "TV Screen"],
        "image": "https://images.unsplash.com/photo-1497215842964-222b430dc094?q=80&w=500&auto=format&fit=crop",
    },
]

USERS = [
    {"id": "user1", "name": "John Doe", "email": "john.doe@company.com", "department": "Marketing", "is_admin": True},
    {"id": "user2", "name": "Jane Smith", "email": "jane.smith@company.com", "department": "Engineering"},
]


def _at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


def seed(s: Session, today=None) -> bool:
    if s.exec(select(Room)).first() is not None:
        return False

    today = today or datetime.now().date()
    next_week = today + timedelta(days=7)

    rooms = [Room(**data) for data in ROOMS]
    s.add_all(rooms)
    s.add_all(User(**data) for data in USERS)
    s.add(SystemSettings())
    s.commit()
    for room in rooms:
        s.refresh(room)

    s.add_all([
        Reservation(
            room_id=rooms[0].id, user_id="user1", title="Executive Meeting",
            description="Quarterly review with department heads",
            start_time=_at(today, 10), end_time=_at(today, 12), attendees=8,
            status=ReservationStatus.CONFIRMED, created_at=datetime.now() - timedelta(days=5),
        ),
        Reservation(
            room_id=rooms[1].id, user_id="user2", title="Project Kickoff",
            description="Initial planning for new product feature",
            start_time=_at(today, 14), end_time=_at(today, 15, 30), attendees=5,
            status=ReservationStatus.CONFIRMED, created_at=datetime.now() - timedelta(days=2),
        ),
        Reservation(
            room_id=rooms[2].id, user_id="user1", title="Company Presentation",
            description="Annual company overview and roadmap",
            start_time=_at(next_week, 13), end_time=_at(next_week, 16), attendees=25,
            status=ReservationStatus.CONFIRMED, created_at=datetime.now() - timedelta(days=10),
        ),
    ])
    s.commit()
    logger.info("seeded %d rooms, %d users, 3 reservations", len(ROOMS), len(USERS))
    return True
