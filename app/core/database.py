# app/core/database.py

import os
import threading

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.deadline import Deadline, DeadlineExceeded

Base = declarative_base()

COMMIT_GUARD_KEY = "commit_guard"


class CommitGuard:
    """
    Decide, sob um lock, quem chega primeiro: o COMMIT no banco ou o
    abandono por prazo. Depois que um dos dois vence, o outro não acontece.
    """

    def __init__(self, deadline: Deadline, action: str) -> None:
        self.deadline = deadline
        self.action = action
        self._lock = threading.Lock()
        self._state = None  # None | "committing" | "abandoned"

    def claim_commit(self) -> None:
        with self._lock:
            if self._state == "abandoned" or self.deadline.expired:
                self._state = "abandoned"
                raise DeadlineExceeded(self.action)
            self._state = "committing"

    def abandon(self) -> bool:
        """Retorna False se o COMMIT já começou e não pode mais ser evitado."""
        with self._lock:
            if self._state == "committing":
                return False
            self._state = "abandoned"
            return True


def _check_commit_guard(conn) -> None:
    # Roda antes do COMMIT do DBAPI; levantar aqui impede o commit
    guard = conn.info.get(COMMIT_GUARD_KEY)
    if guard is not None:
        guard.claim_commit()


def build_engine(db_path: str) -> Engine:
    # Para SQLite, é importante usar connect_args={"check_same_thread": False}
    # (o insert roda numa thread de trabalho, fora da que criou a conexão)
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,
        future=True,
    )
    event.listen(engine, "commit", _check_commit_guard)
    return engine


def init_db(db_path: str) -> Engine:
    """
    Garante que o arquivo do banco e a tabela de cotações existam.
    Pode ser chamado a cada start: create_all só cria o que ainda não existe.
    """
    # Importa o model para registrá-lo no Base.metadata
    from app.models.exchange import Exchange  # noqa: F401

    directory = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(directory, exist_ok=True)

    engine = build_engine(db_path)
    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
