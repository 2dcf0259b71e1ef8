# ============================================================
# config.py — Configuration du service
# ------------------------------------------------------------
# Toutes les valeurs viennent des variables d'environnement
# (un fichier .env est chargé s'il existe).
# ============================================================
import logging
import os
import sys
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv(override=False)


def _to_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Stockage en mémoire par défaut (aucune durabilité)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
LOCAL_TZ = ZoneInfo(os.getenv("LOCAL_TZ", "Europe/Paris"))

# Latence simulée : multiplicateur appliqué à LATENCY_MS (0 = désactivée)
LATENCY_SCALE = float(os.getenv("LATENCY_SCALE", "1.0"))

# Identité fixe renvoyée par /v1/users/me
CURRENT_USER_ID = os.getenv("CURRENT_USER_ID", "user1")

SEED_DATA = _to_bool(os.getenv("SEED_DATA", "true"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Grille horaire : un créneau par heure, bornes incluses
BUSINESS_START_HOUR = int(os.getenv("BUSINESS_START_HOUR", "8"))
BUSINESS_END_HOUR = int(os.getenv("BUSINESS_END_HOUR", "20"))

# Délai simulé par opération, en millisecondes
LATENCY_MS = {
    "list_rooms": 500,
    "get_room": 300,
    "write_room": 500,
    "list_reservations": 500,
    "list_room_reservations": 300,
    "get_reservation": 300,
    "create_reservation": 700,
    "update_reservation": 500,
    "cancel_reservation": 500,
    "room_schedule": 600,
    "list_users": 300,
    "write_user": 500,
    "current_user": 200,
    "admin": 300,
}


def latency_seconds(operation: str) -> float:
    return LATENCY_MS.get(operation, 0) * LATENCY_SCALE / 1000.0


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
