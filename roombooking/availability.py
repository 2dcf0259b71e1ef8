# ============================================================
# availability.py — Calcul des créneaux disponibles
# ------------------------------------------------------------
# Pour une salle et un jour : 13 créneaux horaires (08:00 → 20:00).
# Un créneau est occupé si une réservation de la salle couvre
# l'instant du créneau : start <= t < end (intervalle semi-ouvert).
# Le statut des réservations n'est pas regardé ici ; c'est à
# l'appelant de filtrer ce qui doit bloquer.
# ============================================================
from datetime import date, datetime, time, timedelta
from typing import Iterable, List

from roombooking import config
from roombooking.models import DaySchedule, Reservation, TimeSlot


def day_slots(day: date, room_id: int, reservations: Iterable[Reservation]) -> List[TimeSlot]:
    booked = [r for r in reservations if r.room_id == room_id]
    slots = []
    for hour in range(config.BUSINESS_START_HOUR, config.BUSINESS_END_HOUR + 1):
        instant = datetime.combine(day, time(hour))
        occupant = next((r for r in booked if r.start_time <= instant < r.end_time), None)
        slots.append(TimeSlot(time=instant, available=occupant is None, reservation=occupant))
    return slots


# Chaque jour est calculé indépendamment des autres
def week_schedule(start: date, room_id: int, reservations: Iterable[Reservation], days: int = 7) -> List[DaySchedule]:
    reservations = list(reservations)
    return [
        DaySchedule(date=start + timedelta(days=i), time_slots=day_slots(start + timedelta(days=i), room_id, reservations))
        for i in range(days)
    ]
