# app/api/cotacao.py

import logging
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, get_settings
from app.core.deadline import Deadline, DeadlineExceeded
from app.core.exceptions import CotacaoError
from app.services.exchange import fetch_exchange_quote, save_exchange

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cotacao"])


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


def get_session_factory(request: Request) -> sessionmaker:
    # Criado no startup, depois do init_db
    return request.app.state.session_factory


@router.get("/cotacao")
async def get_cotacao(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Busca a cotação na API externa, grava no banco e devolve só o bid.
    Cada etapa tem seu próprio prazo; qualquer falha vira 500 com o texto do erro.
    """
    # HTTP não carrega prazo do chamador: o prazo da requisição é ilimitado
    request_deadline = Deadline()

    try:
        quote = await fetch_exchange_quote(
            client,
            settings,
            request_deadline.child(settings.EXCHANGE_API_TIMEOUT),
        )
        await save_exchange(
            session_factory,
            quote,
            request_deadline.child(settings.DATABASE_TIMEOUT),
        )
    except (CotacaoError, DeadlineExceeded) as e:
        logger.error("Falha ao obter cotação: %s", e)
        return PlainTextResponse(str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(quote.bid)
