"""
Utilitários: dinheiro, fuso do negócio, paginação, erros, notificador e JWT
"""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest
from jose import jwt
from sqlalchemy.exc import IntegrityError

import config
from models.usuario import Usuario
from utils.auth import extrair_bearer, verify_token
from utils.dinheiro import formatar_brl, somar, to_decimal, valor_monetario
from utils.erros import (
    AppError, BusinessError, ConflictError, NotFoundError, ValidationError, traduzir_integrity_error
)
from utils.notificador import EVENTO_NOVO_PEDIDO, Notificador
from utils.paginacao import paginar
from utils.timezone import fim_do_dia, formatar_data_hora, inicio_do_dia, to_business_time


class TestDinheiro:

    def test_to_decimal_quantiza_em_centavos(self):
        assert to_decimal("10") == Decimal("10.00")
        assert to_decimal(Decimal("2.345")) == Decimal("2.35")
        assert to_decimal(0.1) == Decimal("0.10")

    def test_to_decimal_invalido_usa_padrao(self):
        assert to_decimal("abc") == Decimal("0.00")
        assert to_decimal(None, padrao=None) is None
        assert to_decimal("NaN", padrao=None) is None
        assert to_decimal(float("inf"), padrao=None) is None

    @pytest.mark.parametrize("valor", ["120,00", "NaN", "abc", None])
    def test_valor_monetario_recusa_malformado(self, valor):
        with pytest.raises(ValidationError, match="Saldo inválido"):
            valor_monetario(valor, "Saldo")

    def test_valor_monetario(self):
        assert valor_monetario("120.5", "Saldo") == Decimal("120.50")

    def test_somar(self):
        assert somar([1, "2.5", None, Decimal("0.01")]) == Decimal("3.51")

    def test_formatar_brl(self):
        assert formatar_brl(Decimal("12.3")) == "R$ 12.30"
        assert formatar_brl(Decimal("-10")) == "R$ -10.00"


class TestFusoDoNegocio:

    def test_naive_e_lido_como_horario_local(self):
        convertido = to_business_time(datetime(2024, 3, 10, 14, 30))
        assert convertido.hour == 14
        assert convertido.utcoffset() == timedelta(hours=-3)

    def test_aware_e_convertido(self):
        convertido = to_business_time(datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc))
        assert convertido.hour == 12

    def test_none(self):
        assert to_business_time(None) is None

    def test_limites_do_dia(self):
        dia = date(2024, 3, 10)
        assert inicio_do_dia(dia).hour == 0
        assert fim_do_dia(dia).strftime("%H:%M:%S") == "23:59:59"

    def test_formato_brasileiro(self):
        assert formatar_data_hora(datetime(2024, 3, 10, 9, 5, 7)) == "10/03/2024 09:05:07"


class TestPaginacao:

    def test_paginas(self, db, usuarios):
        query = db.query(Usuario).order_by(Usuario.id)

        segunda = paginar(query, page=2, limit=2)

        assert len(segunda["data"]) == 1
        assert segunda["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
    def test_parametros_invalidos(self, db, page, limit):
        with pytest.raises(ValidationError):
            paginar(db.query(Usuario), page=page, limit=limit)


class TestErros:

    def test_envelope(self):
        assert NotFoundError("Hóspede").to_dict() == {
            "success": False,
            "error": "Hóspede não encontrado",
            "code": "NOT_FOUND",
        }
        assert ConflictError("x").status_code == 409

    @pytest.mark.parametrize("mensagem, esperado", [
        ("UNIQUE constraint failed: hospedes.uid_pulseira", ConflictError),
        ('duplicate key value violates unique constraint "uq_caixa_aberto_por_usuario"', BusinessError),
        ("CHECK constraint failed: ck_produto_estoque_nao_negativo", BusinessError),
        ("UNIQUE constraint failed: usuarios.pin", ValidationError),
        ("FOREIGN KEY constraint failed", ValidationError),
    ])
    def test_traduzir_integrity_error(self, mensagem, esperado):
        erro = IntegrityError("INSERT ...", {}, Exception(mensagem))
        assert isinstance(traduzir_integrity_error(erro), esperado)

    def test_integrity_error_desconhecido(self):
        traduzido = traduzir_integrity_error(IntegrityError("INSERT ...", {}, Exception("???")))

        assert type(traduzido) is AppError
        assert traduzido.status_code == 500
        assert traduzido.codigo == "DATABASE_ERROR"


class TestNotificador:

    def test_entrega_para_assinantes(self):
        notificador = Notificador()
        assinante = Mock()
        notificador.assinar(assinante)

        notificador.emitir(EVENTO_NOVO_PEDIDO, {"id": 1})

        assinante.assert_called_once_with(EVENTO_NOVO_PEDIDO, {"id": 1})

    def test_falha_de_assinante_nao_propaga(self):
        notificador = Notificador()
        quebrado = Mock(side_effect=RuntimeError("socket fechado"))
        saudavel = Mock()
        notificador.assinar(quebrado)
        notificador.assinar(saudavel)

        notificador.emitir(EVENTO_NOVO_PEDIDO, {})

        saudavel.assert_called_once()

    def test_cancelar_assinatura(self):
        notificador = Notificador()
        assinante = Mock()
        notificador.assinar(assinante)
        notificador.cancelar_assinatura(assinante)

        notificador.emitir(EVENTO_NOVO_PEDIDO, {})

        assinante.assert_not_called()


def _token(claims: dict, segredo: str = None) -> str:
    return jwt.encode(claims, segredo or config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


class TestJWT:

    def test_token_valido(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        assert verify_token(_token({"userId": 7, "exp": exp}))["userId"] == 7

    def test_token_expirado(self):
        exp = datetime.now(timezone.utc) - timedelta(minutes=1)
        assert verify_token(_token({"userId": 7, "exp": exp})) is None

    def test_token_sem_expiracao(self):
        assert verify_token(_token({"userId": 7})) is None

    def test_assinatura_errada(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        assert verify_token(_token({"userId": 7, "exp": exp}, segredo="outra-chave")) is None

    def test_extrair_bearer(self):
        assert extrair_bearer("Bearer abc.def") == "abc.def"
        assert extrair_bearer("bearer abc") == "abc"
        assert extrair_bearer("Basic abc") is None
        assert extrair_bearer("Bearer ") is None
        assert extrair_bearer(None) is None
