# app/client/cotacao.py

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Optional

import httpx

from app.core.config import Settings, settings as default_settings
from app.core.deadline import Deadline, DeadlineExceeded, run_with_deadline
from app.core.exceptions import CotacaoClientError
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def fetch_cotacao(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Pede a cotação ao servidor local, com prazo total de CLIENT_TIMEOUT.
    O servidor responde o bid como string JSON ("5.4328"); o valor não é validado como número.
    """
    deadline = Deadline.after(settings.CLIENT_TIMEOUT)
    action = "consulta ao servidor de cotação"

    try:
        async with httpx.AsyncClient(transport=transport) as client:
            r = await run_with_deadline(
                client.get(settings.COTACAO_URL, timeout=deadline.remaining()),
                deadline,
                action,
            )
    except httpx.TimeoutException as e:
        raise DeadlineExceeded(action) from e
    except httpx.HTTPError as e:
        raise CotacaoClientError(f"erro ao consultar {settings.COTACAO_URL}: {e}") from e

    if r.is_error:
        raise CotacaoClientError(f"servidor respondeu {r.status_code}: {r.text.strip()}")

    try:
        value = r.json()
    except ValueError:
        return r.text.strip()
    return value if isinstance(value, str) else r.text.strip()


def write_cotacao(value: str, path: str) -> None:
    """Sobrescreve o arquivo com uma única linha 'Dólar: <valor>'."""
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"Dólar: {value}")
    except OSError as e:
        raise CotacaoClientError(f"erro ao escrever {path}: {e}") from e


async def run(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    # Busca primeiro: se o servidor falhar, o arquivo existente fica intacto
    value = await fetch_cotacao(settings, transport=transport)
    write_cotacao(value, settings.COTACAO_FILE_PATH)
    logger.info("Cotação %s gravada em %s", value, settings.COTACAO_FILE_PATH)
    return value


def main() -> int:
    configure_logging(default_settings.LOG_LEVEL)
    try:
        asyncio.run(run(default_settings))
    except (CotacaoClientError, DeadlineExceeded) as e:
        logger.error("Falha fatal: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
