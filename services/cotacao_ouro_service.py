"""
Cotação do ouro por grama.

Sem COTACAO_OURO_URL configurada, devolve o valor fixo de fallback.
Com a URL, busca a cotação via HTTP e mantém em cache enquanto estiver
dentro da validade; falhas usam a última cotação boa ou o fallback.
"""
import logging
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests

from core.config import settings

logger = logging.getLogger(__name__)

FONTE_MOCK = "https://mock.local"
TITULO_MOCK = "Valor Mockado"


@dataclass(frozen=True)
class CotacaoOuro:
    preco: Decimal
    fonte: Optional[str] = None
    titulo_fonte: Optional[str] = None


class CotacaoOuroService:
    """Provedor da cotação atual do ouro."""

    def __init__(
        self,
        url: Optional[str] = None,
        fallback: Optional[Decimal] = None,
        validade_segundos: Optional[int] = None,
    ):
        self.url = settings.COTACAO_OURO_URL if url is None else url
        self.fallback = settings.COTACAO_OURO_FALLBACK if fallback is None else fallback
        self.validade_segundos = (
            settings.COTACAO_OURO_VALIDADE_SEGUNDOS if validade_segundos is None else validade_segundos
        )
        self._ultima: Optional[CotacaoOuro] = None
        self._obtida_em: float = 0.0

    def _cotacao_fallback(self) -> CotacaoOuro:
        return CotacaoOuro(preco=Decimal(self.fallback), fonte=FONTE_MOCK, titulo_fonte=TITULO_MOCK)

    def _buscar_remota(self) -> CotacaoOuro:
        response = requests.get(self.url, timeout=10)
        response.raise_for_status()
        data = response.json()

        try:
            preco = Decimal(str(data["price"]))
        except (KeyError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Resposta de cotação inválida: {data!r}") from e
        if not preco.is_finite():
            raise ValueError(f"Cotação não numérica recebida: {preco}")
        if preco < 0:
            raise ValueError(f"Cotação negativa recebida: {preco}")

        return CotacaoOuro(
            preco=preco,
            fonte=data.get("source", self.url),
            titulo_fonte=data.get("sourceTitle"),
        )

    def obter_cotacao_atual(self) -> CotacaoOuro:
        """Retorna a cotação atual. Nunca falha."""
        if not self.url:
            return self._cotacao_fallback()

        if self._ultima and (time.monotonic() - self._obtida_em) < self.validade_segundos:
            return self._ultima

        try:
            cotacao = self._buscar_remota()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Falha ao buscar cotação do ouro em %s: %s", self.url, e)
            return self._ultima or self._cotacao_fallback()

        self._ultima = cotacao
        self._obtida_em = time.monotonic()
        logger.info("Cotação do ouro atualizada: %s (%s)", cotacao.preco, cotacao.fonte)
        return cotacao


cotacao_ouro_service = CotacaoOuroService()
