# ============================================================
# errors.py — Erreurs métier du service
# ------------------------------------------------------------
# Les repositories lèvent ces exceptions ; app.py les traduit en
# réponses HTTP, ui.py les affiche en bandeau de notification.
# ============================================================


class RoomBookingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RoomBookingError):
    status_code = 404


class ValidationError(RoomBookingError):
    status_code = 400


# Salle encore utilisée, chevauchement, salle désactivée
class ConflictError(RoomBookingError):
    status_code = 409


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, target: str):
        super().__init__(f"cannot change status from {current} to {target}")
        self.current = current
        self.target = target


class MaintenanceError(RoomBookingError):
    status_code = 503

    def __init__(self, message: str = "service is in maintenance mode"):
        super().__init__(message)
