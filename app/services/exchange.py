from __future__ import annotations

import asyncio
import logging

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.core.database import COMMIT_GUARD_KEY, CommitGuard
from app.core.deadline import Deadline, DeadlineExceeded, run_with_deadline
from app.core.exceptions import PayloadError, ProviderError, StorageError
from app.models.exchange import Exchange
from app.schemas.exchange import ExchangeQuote, parse_exchange_payload

logger = logging.getLogger(__name__)

FETCH_ACTION = "consulta à API de cotação"
SAVE_ACTION = "gravação da cotação"


async def fetch_exchange_quote(
    client: httpx.AsyncClient,
    settings: Settings,
    deadline: Deadline,
) -> ExchangeQuote:
    """Busca a cotação atual na API externa, dentro do prazo recebido."""
    try:
        r = await run_with_deadline(
            client.get(settings.EXCHANGE_API_URL, timeout=deadline.remaining()),
            deadline,
            FETCH_ACTION,
        )
        r.raise_for_status()
    except httpx.TimeoutException as e:
        raise DeadlineExceeded(FETCH_ACTION) from e
    except httpx.HTTPStatusError as e:
        raise ProviderError(f"API de cotação respondeu {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ProviderError(f"erro ao consultar API de cotação: {e}") from e

    try:
        data = r.json()
    except ValueError as e:
        raise PayloadError(f"resposta da API não é JSON: {e}") from e

    quote = parse_exchange_payload(data, settings.EXCHANGE_PAIR)
    logger.info("Cotação %s recebida: bid=%s", settings.EXCHANGE_PAIR, quote.bid)
    return quote


def _insert_exchange(session_factory: sessionmaker, quote: ExchangeQuote, guard: CommitGuard) -> int:
    exchange = Exchange(
        code=quote.code,
        codein=quote.codein,
        name=quote.name,
        high=quote.high,
        low=quote.low,
        var_bid=quote.var_bid,
        pct_change=quote.pct_change,
        bid=quote.bid,
        ask=quote.ask,
    )
    try:
        # Ao sair do with sem commit, a sessão faz rollback
        with session_factory() as db:
            db.add(exchange)
            db.flush()
            exchange_id = exchange.id
            # O listener de "commit" do engine consulta o guard antes do COMMIT
            conn_info = db.connection().info
            conn_info[COMMIT_GUARD_KEY] = guard
            try:
                db.commit()
            finally:
                conn_info.pop(COMMIT_GUARD_KEY, None)
    except SQLAlchemyError as e:
        raise StorageError(f"erro ao gravar cotação: {e}") from e
    return exchange_id


def _discard_result(task: asyncio.Task) -> None:
    # Insert abandonado: o resultado (ou erro) não interessa mais a ninguém
    if not task.cancelled():
        task.exception()


async def save_exchange(
    session_factory: sessionmaker,
    quote: ExchangeQuote,
    deadline: Deadline,
) -> int:
    """
    Grava uma linha na tabela exchanges, dentro do prazo recebido. Retorna o id.

    Se o prazo vence antes do COMMIT, a transação é desfeita e nada fica gravado.
    Se o COMMIT já tinha começado, espera ele terminar e trata como sucesso.
    """
    guard = CommitGuard(deadline, SAVE_ACTION)
    task = asyncio.ensure_future(
        asyncio.to_thread(_insert_exchange, session_factory, quote, guard)
    )
    try:
        exchange_id = await run_with_deadline(asyncio.shield(task), deadline, SAVE_ACTION)
    except DeadlineExceeded:
        if guard.abandon():
            task.add_done_callback(_discard_result)
            raise
        logger.warning("Prazo de gravação vencido com COMMIT em andamento; aguardando")
        exchange_id = await task
    logger.info("Cotação gravada com id=%s", exchange_id)
    return exchange_id
