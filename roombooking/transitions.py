# ============================================================
# transitions.py — Machine à états des réservations
# ------------------------------------------------------------
#   PENDING   → CONFIRMED  (approbation admin)
#   PENDING   → REJECTED   (refus admin)
#   CONFIRMED → CANCELLED  (annulation propriétaire / admin)
# CANCELLED et REJECTED sont terminaux.
# Réappliquer le statut courant ne change rien.
# ============================================================
from roombooking.errors import InvalidTransitionError
from roombooking.models import Reservation, ReservationStatus

ALLOWED = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.REJECTED},
    ReservationStatus.CONFIRMED: {ReservationStatus.CANCELLED},
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.REJECTED: set(),
}


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    current, target = ReservationStatus(current), ReservationStatus(target)
    return current == target or target in ALLOWED[current]


def apply_status(reservation: Reservation, target: ReservationStatus) -> bool:
    """Change le statut en place ; renvoie False si rien n'a changé."""
    current = ReservationStatus(reservation.status)
    target = ReservationStatus(target)
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
    if current == target:
        return False
    reservation.status = target
    return True
