# ============================================================
# app.py — Point d'entrée du service Room Booking
# ------------------------------------------------------------
# Ce module initialise l'application FastAPI :
#   - Configure les logs
#   - Crée les tables du magasin en mémoire et charge la démo
#   - Traduit les erreurs métier en réponses HTTP
#   - Monte les routes API et l'interface web (UI)
# ============================================================
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from roombooking import config
from roombooking.api import router
from roombooking.db import engine, init_db
from roombooking.errors import RoomBookingError
from roombooking.seed import seed
from roombooking.ui import router as ui_router

config.setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Room Booking Service")


# Exécuté au lancement :
# 1️. Crée les tables.
# 2️. Charge les salles / utilisateurs / réservations de démo si la base est vide.
@app.on_event("startup")
def start():
    init_db()
    if config.SEED_DATA:
        with Session(engine) as s:
            seed(s)


# Une seule traduction pour toutes les erreurs métier
@app.exception_handler(RoomBookingError)
async def handle_domain_error(request: Request, exc: RoomBookingError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health")
def health():
    return {"status": "ok"}


# Interface utilisateur (Jinja2) puis routes REST
app.include_router(ui_router)
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("roombooking.app:app", host="0.0.0.0", port=8000)
