# app/models/exchange.py

from sqlalchemy import CheckConstraint, Column, Integer, String, TIMESTAMP, func

from app.core.database import Base

_REQUIRED_TEXT = ("code", "codein", "name", "high", "low", "varBid", "pctChange", "bid", "ask")


class Exchange(Base):
    """
    Uma observação da cotação USD/BRL, gravada uma vez por consulta bem-sucedida.
    Nunca é atualizada nem apagada pela aplicação.
    """
    __tablename__ = "exchanges"
    __table_args__ = tuple(
        CheckConstraint(f"{column} <> ''", name=f"ck_exchanges_{column}_not_empty")
        for column in _REQUIRED_TEXT
    ) + ({"sqlite_autoincrement": True},)

    id = Column(Integer, primary_key=True, autoincrement=True)

    code = Column(String(3), nullable=False)     # moeda de origem, ex.: "USD"
    codein = Column(String(3), nullable=False)   # moeda de destino, ex.: "BRL"
    name = Column(String(100), nullable=False)

    # Valores vêm como texto da API e são guardados sem conversão
    high = Column(String(10), nullable=False)
    low = Column(String(10), nullable=False)
    var_bid = Column("varBid", String(10), nullable=False)
    pct_change = Column("pctChange", String(10), nullable=False)
    bid = Column(String(10), nullable=False)
    ask = Column(String(10), nullable=False)

    create_date = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())
