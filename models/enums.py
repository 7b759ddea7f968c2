"""
Tipos fechados para status/tipos/cargos.
Persistidos como texto e validados na fronteira do banco (Enum não nativo).
"""
import enum

from sqlalchemy import Enum


class StatusQuarto(str, enum.Enum):
    LIVRE = "LIVRE"
    OCUPADO = "OCUPADO"
    LIMPEZA = "LIMPEZA"
    MANUTENCAO = "MANUTENCAO"


class TipoHospede(str, enum.Enum):
    HOSPEDE = "HOSPEDE"
    DAY_USE = "DAY_USE"
    VIP = "VIP"


class StatusPedido(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PREPARANDO = "PREPARANDO"
    PRONTO = "PRONTO"
    ENTREGUE = "ENTREGUE"
    CANCELADO = "CANCELADO"


class MetodoCriacao(str, enum.Enum):
    NFC = "NFC"
    MANUAL = "MANUAL"


class MetodoPagamento(str, enum.Enum):
    PIX = "PIX"
    DINHEIRO = "DINHEIRO"
    CARTAO = "CARTAO"
    DEBITO = "DEBITO"


class StatusCaixa(str, enum.Enum):
    ABERTO = "ABERTO"
    FECHADO = "FECHADO"


class TipoLancamento(str, enum.Enum):
    VENDA = "VENDA"
    SANGRIA = "SANGRIA"
    SUPRIMENTO = "SUPRIMENTO"


class TipoCategoria(str, enum.Enum):
    DESPESA = "DESPESA"
    RECEITA = "RECEITA"


class StatusConta(str, enum.Enum):
    PENDENTE = "PENDENTE"
    ATRASADO = "ATRASADO"
    PAGO = "PAGO"
    RECEBIDO = "RECEBIDO"


class OrigemContaReceber(str, enum.Enum):
    HOSPEDE = "HOSPEDE"
    CARTAO_CREDITO = "CARTAO_CREDITO"
    OUTROS = "OUTROS"


class Cargo(str, enum.Enum):
    WAITER = "WAITER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class SetorProduto(str, enum.Enum):
    COZINHA = "COZINHA"
    BAR_PISCINA = "BAR_PISCINA"
    BOATE = "BOATE"


CARGOS_GERENCIA = (Cargo.MANAGER, Cargo.ADMIN)


def enum_coluna(enum_cls, nome: str) -> Enum:
    return Enum(
        enum_cls,
        name=nome,
        values_callable=lambda obj: [e.value for e in obj],
        native_enum=False,
        validate_strings=True,
        length=20,
    )
