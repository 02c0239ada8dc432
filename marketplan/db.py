# marketplan/db.py
from sqlmodel import SQLModel, Session, create_engine
from marketplan.config import settings

# SQLite (dev/tests) exige check_same_thread=False avec le serveur ASGI
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Crée l'engine SQLModel / SQLAlchemy
engine = create_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, connect_args=_connect_args)

def init_db() -> None:
    """
    Crée toutes les tables définies par SQLModel.metadata.
    À appeler une fois au boot de l'application.
    """
    import marketplan.models  # noqa: F401  (enregistre les tables)
    SQLModel.metadata.create_all(engine)

def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
