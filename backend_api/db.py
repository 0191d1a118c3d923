# backend_api/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from backend_api.config import settings

DATABASE_URL = settings.DATABASE_URL

connect_args = {}
engine_kwargs = {}

# SQLite: la conexión se comparte entre hilos (uvicorn / TestClient)
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False
    # En memoria: una sola conexión o cada sesión vería una BD vacía
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(
    DATABASE_URL,
    echo=settings.DB_ECHO,
    connect_args=connect_args,
    **engine_kwargs,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
