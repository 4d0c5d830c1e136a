"""Generate database session"""

from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

from token_chess import config
from token_chess.db.schema import Base

# In-memory SQLite only lives as long as its connection: share a single one across sessions.
engine = create_engine(
    config.DATABASE_URL,
    echo=config.SQL_ECHO,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
SessionLocal = sessionmaker(autoflush=False, bind=engine)

# Ensure all tables are created
Base.metadata.create_all(bind=engine)
