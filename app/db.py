from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine
from app.config import config


def _make_engine(url: str):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # in-memory databases live on a single connection
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)
    return create_engine(url, echo=False, pool_pre_ping=True)


engine = _make_engine(config.DATABASE_URL)

def init_db():
    # Import models so SQLModel.metadata includes them
    import app.models.kv
    SQLModel.metadata.create_all(engine)