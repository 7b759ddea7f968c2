"""
Caixa (sessão do operador)
- Abertura/fechamento com cálculo da quebra de caixa
- Sangria (saída, valor negativo), suprimento (entrada) e venda em dinheiro
- Lançamentos são somente inserção

saldo esperado = saldo inicial + VENDAS - |SANGRIAS| + SUPRIMENTOS
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from database.transacao import transacao, travar_linha
from models.caixa import Caixa, LancamentoCaixa
from models.enums import StatusCaixa, TipoLancamento
from models.usuario import Usuario
from utils.dinheiro import ZERO, formatar_brl, to_decimal, valor_monetario
from utils.erros import BusinessError, NotFoundError
from utils.logging_utils import log_event, log_warning
from utils.paginacao import paginar
from utils.timezone import agora_negocio, formatar_data_hora

ULTIMOS_LANCAMENTOS = 10


def calcular_resumo(saldo_inicial, lancamentos: Iterable[LancamentoCaixa]) -> dict:
    lancamentos = list(lancamentos)
    vendas = ZERO
    sangrias = ZERO
    suprimentos = ZERO
    for lancamento in lancamentos:
        valor = to_decimal(lancamento.valor)
        if lancamento.tipo == TipoLancamento.VENDA:
            vendas += valor
        elif lancamento.tipo == TipoLancamento.SANGRIA:
            sangrias += abs(valor)
        elif lancamento.tipo == TipoLancamento.SUPRIMENTO:
            suprimentos += valor

    saldo_inicial = to_decimal(saldo_inicial)
    return {
        "saldoInicial": saldo_inicial,
        "vendasDinheiro": vendas,
        "sangrias": sangrias,
        "suprimentos": suprimentos,
        "saldoEsperadoDinheiro": saldo_inicial + vendas - sangrias + suprimentos,
        "totalLancamentos": len(lancamentos),
    }


class CaixaService:

    # ---------- Consultas ----------

    def buscar_caixa_aberto(self, db: Session, usuario_id: int, travar: bool = False) -> Optional[Caixa]:
        caixa = (
            db.query(Caixa)
            .filter(Caixa.usuario_id == usuario_id, Caixa.status == StatusCaixa.ABERTO)
            .first()
        )
        if caixa is not None and travar:
            caixa = travar_linha(db, Caixa, caixa.id)
        return caixa

    def _lancamentos(self, db: Session, caixa_id: int) -> List[LancamentoCaixa]:
        return (
            db.query(LancamentoCaixa)
            .filter(LancamentoCaixa.caixa_id == caixa_id)
            .order_by(LancamentoCaixa.data.asc(), LancamentoCaixa.id.asc())
            .all()
        )

    def saldo_atual(self, db: Session, caixa: Caixa) -> Decimal:
        resumo = calcular_resumo(caixa.saldo_inicial, self._lancamentos(db, caixa.id))
        return resumo["saldoEsperadoDinheiro"]

    def obter_status(self, db: Session, usuario_id: int) -> dict:
        caixa = self.buscar_caixa_aberto(db, usuario_id)
        if caixa is None:
            return {"temCaixaAberto": False, "caixa": None, "resumo": None, "ultimosLancamentos": []}

        lancamentos = self._lancamentos(db, caixa.id)
        recentes = sorted(lancamentos, key=lambda l: (l.data, l.id), reverse=True)[:ULTIMOS_LANCAMENTOS]
        return {
            "temCaixaAberto": True,
            "caixa": caixa,
            "resumo": calcular_resumo(caixa.saldo_inicial, lancamentos),
            "ultimosLancamentos": recentes,
        }

    def historico(self, db: Session, usuario_id: int, page: int = 1, limit: int = 10) -> dict:
        """Caixas fechados do operador, mais recentes primeiro"""
        query = (
            db.query(Caixa)
            .options(joinedload(Caixa.usuario))
            .filter(Caixa.usuario_id == usuario_id, Caixa.status == StatusCaixa.FECHADO)
            .order_by(Caixa.data_fechamento.desc())
        )
        return paginar(query, page, limit)

    # ---------- Abertura / fechamento ----------

    def abrir_caixa(self, db: Session, usuario_id: int, saldo_inicial) -> Caixa:
        saldo = valor_monetario(saldo_inicial, "Saldo inicial")
        if saldo < ZERO:
            raise BusinessError("Saldo inicial não pode ser negativo")

        with transacao(db):
            aberto = self.buscar_caixa_aberto(db, usuario_id)
            if aberto:
                raise BusinessError(
                    f"Usuário já possui um caixa aberto (ID: {aberto.id}, "
                    f"aberto em {formatar_data_hora(aberto.data_abertura)})"
                )

            if not db.query(Usuario).filter(Usuario.id == usuario_id).first():
                raise NotFoundError("Usuário")

            caixa = Caixa(
                usuario_id=usuario_id,
                saldo_inicial=saldo,
                data_abertura=agora_negocio(),
                status=StatusCaixa.ABERTO,
            )
            db.add(caixa)
            db.flush()

        log_event("caixa", usuario_id, "abrir caixa", f"id={caixa.id} saldo_inicial={formatar_brl(saldo)}")
        return caixa

    def fechar_caixa(
        self,
        db: Session,
        usuario_id: int,
        saldo_final_dinheiro,
        saldo_final_cartao=None,
        observacao: Optional[str] = None,
    ) -> dict:
        declarado = valor_monetario(saldo_final_dinheiro, "Saldo final em dinheiro")
        cartao = (
            valor_monetario(saldo_final_cartao, "Saldo final em cartão") if saldo_final_cartao is not None else None
        )

        with transacao(db):
            caixa = self.buscar_caixa_aberto(db, usuario_id, travar=True)
            if not caixa:
                raise BusinessError("Usuário não possui caixa aberto")

            resumo = calcular_resumo(caixa.saldo_inicial, self._lancamentos(db, caixa.id))
            # Positivo = sobra; negativo = falta
            quebra = declarado - resumo["saldoEsperadoDinheiro"]

            caixa.status = StatusCaixa.FECHADO
            caixa.data_fechamento = agora_negocio()
            caixa.saldo_final_dinheiro = declarado
            caixa.saldo_final_cartao = cartao
            caixa.observacao = (
                f"{observacao} | Quebra: {formatar_brl(quebra)}"
                if observacao
                else f"Quebra de caixa: {formatar_brl(quebra)}"
            )
            db.flush()

        resumo.update({"saldoFinalDinheiro": declarado, "quebraCaixa": quebra})
        log_event("caixa", usuario_id, "fechar caixa", f"id={caixa.id} quebra={formatar_brl(quebra)}")
        return {"caixa": caixa, "resumo": resumo}

    # ---------- Lançamentos ----------

    def registrar_sangria_na_transacao(
        self, db: Session, usuario_id: int, valor, observacao: Optional[str] = None
    ) -> LancamentoCaixa:
        valor = valor_monetario(valor, "Valor da sangria")
        if valor <= ZERO:
            raise BusinessError("Valor da sangria deve ser maior que zero")

        caixa = self.buscar_caixa_aberto(db, usuario_id, travar=True)
        if not caixa:
            raise BusinessError("Usuário não possui caixa aberto")

        saldo = self.saldo_atual(db, caixa)
        if valor > saldo:
            raise BusinessError(
                f"Saldo insuficiente para sangria. Saldo atual: {formatar_brl(saldo)}, "
                f"Valor solicitado: {formatar_brl(valor)}"
            )

        lancamento = LancamentoCaixa(
            caixa_id=caixa.id,
            tipo=TipoLancamento.SANGRIA,
            valor=-valor,
            observacao=observacao or "Sangria registrada",
            data=agora_negocio(),
        )
        db.add(lancamento)
        db.flush()
        return lancamento

    def registrar_sangria(self, db: Session, usuario_id: int, valor, observacao: Optional[str] = None) -> LancamentoCaixa:
        with transacao(db):
            lancamento = self.registrar_sangria_na_transacao(db, usuario_id, valor, observacao)
        log_event("caixa", usuario_id, "sangria", formatar_brl(abs(lancamento.valor)))
        return lancamento

    def registrar_suprimento(self, db: Session, usuario_id: int, valor, observacao: Optional[str] = None) -> LancamentoCaixa:
        valor = valor_monetario(valor, "Valor do suprimento")
        if valor <= ZERO:
            raise BusinessError("Valor do suprimento deve ser maior que zero")

        with transacao(db):
            caixa = self.buscar_caixa_aberto(db, usuario_id, travar=True)
            if not caixa:
                raise BusinessError("Usuário não possui caixa aberto")

            lancamento = LancamentoCaixa(
                caixa_id=caixa.id,
                tipo=TipoLancamento.SUPRIMENTO,
                valor=valor,
                observacao=observacao or "Suprimento registrado",
                data=agora_negocio(),
            )
            db.add(lancamento)
            db.flush()

        log_event("caixa", usuario_id, "suprimento", formatar_brl(valor))
        return lancamento

    def registrar_venda_na_transacao(
        self, db: Session, usuario_id: int, valor, observacao: Optional[str] = None
    ) -> Optional[LancamentoCaixa]:
        """
        Venda em dinheiro. Sem caixa aberto não é erro: a venda já aconteceu,
        apenas não há onde lançar (retorna None e registra aviso).
        """
        valor = valor_monetario(valor, "Valor da venda")
        if valor <= ZERO:
            raise BusinessError("Valor da venda deve ser maior que zero")

        caixa = self.buscar_caixa_aberto(db, usuario_id)
        if not caixa:
            log_warning(
                "caixa",
                f"Venda em dinheiro ({formatar_brl(valor)}) para usuário {usuario_id} sem caixa aberto",
            )
            return None

        lancamento = LancamentoCaixa(
            caixa_id=caixa.id,
            tipo=TipoLancamento.VENDA,
            valor=valor,
            observacao=observacao or "Venda em dinheiro",
            data=agora_negocio(),
        )
        db.add(lancamento)
        db.flush()
        return lancamento

    def registrar_venda(self, db: Session, usuario_id: int, valor, observacao: Optional[str] = None) -> Optional[LancamentoCaixa]:
        with transacao(db):
            lancamento = self.registrar_venda_na_transacao(db, usuario_id, valor, observacao)
        if lancamento is not None:
            log_event("caixa", usuario_id, "venda dinheiro", formatar_brl(valor))
        return lancamento
