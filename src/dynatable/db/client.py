# src/dynatable/db/client.py
"""Engine and session management."""

from typing import Any, Dict, Iterator, Optional

from pydantic import BaseModel, Field
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, sessionmaker

from dynatable.core.logging import color_palette, log


class DbConfig(BaseModel):
    """Database connection settings.

    Either give a full SQLAlchemy `url`, or the individual parts.
    """

    driver: str = "postgresql"
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    url: Optional[str] = None

    def get_url(self) -> URL | str:
        if self.url:
            return self.url
        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


class PoolConfig(BaseModel):
    """Connection pool settings passed to `create_engine`."""

    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_pre_ping: bool = True
    echo: bool = False

    def engine_kwargs(self) -> Dict[str, Any]:
        return self.model_dump()


class DbClient:
    """Owns the engine and the session factory for an application."""

    def __init__(self, config: DbConfig, pool_config: Optional[PoolConfig] = None):
        self.config = config
        self.pool_config = pool_config or PoolConfig()
        self.engine: Engine = create_engine(
            config.get_url(), **self.pool_config.engine_kwargs()
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False
        )

    def get_db(self) -> Iterator[Session]:
        """FastAPI dependency yielding a session that is closed afterwards."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def test_connection(self) -> bool:
        """Run `SELECT 1`; connection errors propagate."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        log.success(
            f"Connected to {color_palette['path'](self.engine.url.render_as_string(hide_password=True))}"
        )
        return True

    def dispose(self) -> None:
        self.engine.dispose()
