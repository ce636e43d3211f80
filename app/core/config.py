# app/core/config.py

import os
from dotenv import load_dotenv

# Caminho da raiz do projeto (onde está o main.py e o .env)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
ENV_PATH = os.path.join(BASE_DIR, ".env")

# Carrega variáveis do arquivo .env, se existir
if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH)


class Settings:
    def __init__(self) -> None:
        # API externa de cotação (AwesomeAPI)
        self.EXCHANGE_API_URL: str = os.getenv(
            "EXCHANGE_API_URL",
            "https://economia.awesomeapi.com.br/json/last/USD-BRL",
        )
        self.EXCHANGE_PAIR: str = os.getenv("EXCHANGE_PAIR", "USDBRL")
        self.EXCHANGE_API_TIMEOUT: float = float(os.getenv("EXCHANGE_API_TIMEOUT", "0.2"))

        # Banco SQLite com o histórico de cotações
        self.DATABASE_PATH: str = os.getenv("DATABASE_PATH", "./server/db/exchanges.db")
        # 10ms é bem apertado para um insert em disco, mas é o valor combinado
        self.DATABASE_TIMEOUT: float = float(os.getenv("DATABASE_TIMEOUT", "0.01"))

        self.SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
        self.SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8080"))

        # Cliente
        self.COTACAO_URL: str = os.getenv("COTACAO_URL", "http://localhost:8080/cotacao")
        self.CLIENT_TIMEOUT: float = float(os.getenv("CLIENT_TIMEOUT", "0.3"))
        self.COTACAO_FILE_PATH: str = os.getenv("COTACAO_FILE_PATH", "./client/cotacao.txt")

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def get_settings() -> Settings:
    return settings
