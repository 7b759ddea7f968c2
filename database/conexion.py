from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

import config

# Declarative base
Base = declarative_base()


class LedgerStorage:
    """
    Handle explícito do banco relacional (hóspedes, quartos, produtos, pedidos,
    pagamentos, caixas e contas).

    É construído no start do processo e injetado nos serviços; não existe
    cliente global de módulo. Nível de isolamento mínimo: READ COMMITTED.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or config.DATABASE_URL
        self.engine = self._criar_engine(self.url, config.DB_ECHO if echo is None else echo)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @staticmethod
    def _criar_engine(url: str, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False, "timeout": 30}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Banco em memória: uma única conexão compartilhada
                engine = create_engine(url, echo=echo, connect_args=connect_args, poolclass=StaticPool)
            else:
                engine = create_engine(url, echo=echo, connect_args=connect_args)

            @event.listens_for(engine, "connect")
            def _sqlite_pragmas(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

            return engine

        return create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            isolation_level="READ COMMITTED",
        )

    def create_all(self) -> None:
        # Garante que todos os modelos estejam registrados no metadata
        import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def get_db(self) -> Iterator[Session]:
        """Dependência FastAPI: uma sessão por requisição"""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
