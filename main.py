# main.py

import uvicorn
from fastapi import FastAPI

from app.core.config import settings
from app.core.database import build_session_factory, init_db
from app.core.logging import configure_logging

from app.api.cotacao import router as cotacao_router

app = FastAPI(
    title="Cotação do Dólar API",
    version="0.1.0",
)


@app.on_event("startup")
def on_startup():
    configure_logging(settings.LOG_LEVEL)
    # Erro aqui derruba o processo: sem banco não há servidor
    engine = init_db(settings.DATABASE_PATH)
    app.state.session_factory = build_session_factory(engine)


app.include_router(cotacao_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
