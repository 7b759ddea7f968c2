"""
Valores monetários em ponto fixo (Decimal, 2 casas)
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from utils.erros import ValidationError

Numero = Union[int, float, str, Decimal]

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(valor: Optional[Numero], padrao: Decimal = ZERO) -> Decimal:
    """Converte para Decimal quantizado em centavos (float passa por str para não herdar ruído binário)"""
    if valor is None:
        return padrao
    try:
        if isinstance(valor, float):
            valor = repr(valor)
        convertido = Decimal(valor)
        if not convertido.is_finite():
            return padrao
        return convertido.quantize(CENTAVO, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return padrao


def valor_monetario(valor: Optional[Numero], campo: str) -> Decimal:
    """Entrada de operação que grava dinheiro: malformado é erro, nunca zero"""
    convertido = to_decimal(valor, padrao=None)
    if convertido is None:
        raise ValidationError(f"{campo} inválido: {valor!r}")
    return convertido


def somar(valores: Iterable[Numero]) -> Decimal:
    total = ZERO
    for valor in valores:
        total += to_decimal(valor)
    return total


def formatar_brl(valor: Optional[Numero]) -> str:
    return f"R$ {to_decimal(valor):.2f}"
