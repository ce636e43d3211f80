# app/schemas/exchange.py

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from app.core.exceptions import PayloadError


class ExchangeQuote(BaseModel):
    """
    Um par de moedas como a AwesomeAPI devolve, ex.:
    {"USDBRL": {"code": "USD", "codein": "BRL", "bid": "5.4328", ...}}
    Todos os valores chegam como string.
    """
    code: str = Field(min_length=1)
    codein: str = Field(min_length=1)
    name: str = Field(min_length=1)
    high: str = Field(min_length=1)
    low: str = Field(min_length=1)
    var_bid: str = Field(alias="varBid", min_length=1)
    pct_change: str = Field(alias="pctChange", min_length=1)
    bid: str = Field(min_length=1)
    ask: str = Field(min_length=1)

    # Não são gravados: o banco define create_date no insert
    timestamp: Optional[str] = None
    create_date: Optional[str] = None


def parse_exchange_payload(data: Any, pair: str) -> ExchangeQuote:
    if not isinstance(data, dict) or pair not in data:
        raise PayloadError(f"resposta da API sem a chave {pair!r}")
    try:
        return ExchangeQuote.model_validate(data[pair])
    except ValidationError as e:
        raise PayloadError(f"cotação {pair} inválida: {e}") from e
