# ============================================================
# db.py — Magasin de données en mémoire
# ------------------------------------------------------------
# Un seul moteur SQLModel partagé par tout le processus.
# Avec SQLite en mémoire, StaticPool garde une connexion unique
# sinon chaque connexion verrait une base vide.
# ============================================================
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from roombooking import config


def make_engine(url: str = None):
    url = url or config.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)


engine = make_engine()


def init_db(bind=None):
    # crée les tables (Room, Reservation, User, SystemSettings)
    SQLModel.metadata.create_all(bind or engine)


# Dépendance FastAPI : fournit une Session par requête, auto-close
def get_session():
    with Session(engine) as s:
        yield s
