# app/core/exceptions.py


class CotacaoError(Exception):
    """Erro base da aplicação de cotação."""


class ProviderError(CotacaoError):
    """Falha de rede ou status de erro vindo da API de cotação."""


class PayloadError(CotacaoError):
    """Resposta da API sem o formato esperado."""


class StorageError(CotacaoError):
    """Falha ao abrir o banco ou gravar a cotação."""


class CotacaoClientError(CotacaoError):
    """Falha do cliente ao buscar a cotação ou escrever o arquivo."""
