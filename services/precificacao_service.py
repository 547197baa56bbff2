"""
Cálculo de custo das peças banhadas.

    calculo_metal        = (camadas + mao_de_obra) * cotacao_ouro / 1000
    custo_final_cliente  = peso_peca * calculo_metal + valor_peca_bruta
    preco_sugerido       = custo_final_cliente * margem

Todos os valores em Decimal, sem arredondamento.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

Numero = Union[Decimal, int, float, str, None]

MIL = Decimal(1000)


@dataclass(frozen=True)
class CustoPeca:
    calculo_metal: Decimal
    custo_final_cliente: Decimal
    preco_sugerido: Decimal


def para_decimal(valor: Numero) -> Decimal:
    """Converte para Decimal; ausente vira 0. Float passa por str para não herdar o erro binário."""
    if valor is None or valor == "":
        return Decimal(0)
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, float):
        return Decimal(str(valor))
    return Decimal(valor)


def calcular_calculo_metal(camadas: Numero, mao_de_obra: Numero, cotacao_ouro: Numero) -> Decimal:
    return (para_decimal(camadas) + para_decimal(mao_de_obra)) * para_decimal(cotacao_ouro) / MIL


def calcular_custo_peca(
    peso_peca: Numero,
    valor_peca_bruta: Numero,
    camadas: Numero,
    mao_de_obra: Numero,
    cotacao_ouro: Numero,
    margem: Optional[Numero] = None,
) -> CustoPeca:
    """
    Calcula custo de metal, custo final ao cliente e preço sugerido de uma peça.

    Função pura: nenhuma validação de negativos, entradas ausentes valem 0.
    """
    calculo_metal = calcular_calculo_metal(camadas, mao_de_obra, cotacao_ouro)
    custo_final = para_decimal(peso_peca) * calculo_metal + para_decimal(valor_peca_bruta)
    preco_sugerido = custo_final * para_decimal(margem)

    return CustoPeca(
        calculo_metal=calculo_metal,
        custo_final_cliente=custo_final,
        preco_sugerido=preco_sugerido,
    )
