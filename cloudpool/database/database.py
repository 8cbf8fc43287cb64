from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from cloudpool.config import get_settings

settings = get_settings()

# SQLite connections are shared across threads by the session factory.
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(
    settings.database_url, echo=settings.database_echo, connect_args=connect_args
)

# autocommit/autoflush off: repositories call commit() explicitly.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for every ORM model in cloudpool.database.models
Base = declarative_base()
