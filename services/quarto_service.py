"""
Ciclo de vida dos quartos
Regras de transição:
- LIVRE pode ir para OCUPADO, LIMPEZA ou MANUTENCAO
- OCUPADO só vai para LIMPEZA ou MANUTENCAO (nunca direto para LIVRE)
- LIMPEZA e MANUTENCAO voltam para LIVRE
A liberação no checkout considera quantos hóspedes ativos ainda estão no quarto.
"""
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from database.transacao import transacao, travar_linha
from models.enums import StatusQuarto
from models.hospede import Hospede
from models.quarto import Quarto
from utils.erros import BusinessError, NotFoundError, ValidationError
from utils.logging_utils import log_event, log_warning
from utils.timezone import agora_negocio

TRANSICOES_PERMITIDAS = {
    StatusQuarto.LIVRE: {StatusQuarto.OCUPADO, StatusQuarto.LIMPEZA, StatusQuarto.MANUTENCAO},
    StatusQuarto.OCUPADO: {StatusQuarto.LIMPEZA, StatusQuarto.MANUTENCAO},
    StatusQuarto.LIMPEZA: {StatusQuarto.LIVRE},
    StatusQuarto.MANUTENCAO: {StatusQuarto.LIVRE},
}

# Status que aceitam novos hóspedes (quartos com mais de um ocupante)
STATUS_ACEITA_CHECKIN = (StatusQuarto.LIVRE, StatusQuarto.OCUPADO)


class QuartoService:

    # ---------- Consultas ----------

    def listar_quartos(self, db: Session, status: Optional[StatusQuarto] = None) -> List[Quarto]:
        query = db.query(Quarto).options(selectinload(Quarto.hospedes))
        if status:
            query = query.filter(Quarto.status == status)
        return query.order_by(Quarto.andar.asc(), Quarto.numero.asc()).all()

    def buscar_quarto(self, db: Session, quarto_id: int) -> Quarto:
        quarto = (
            db.query(Quarto)
            .options(selectinload(Quarto.hospedes))
            .filter(Quarto.id == quarto_id)
            .first()
        )
        if not quarto:
            raise NotFoundError("Quarto")
        return quarto

    def buscar_quarto_por_numero(self, db: Session, numero: str) -> Optional[Quarto]:
        if not numero:
            return None
        return (
            db.query(Quarto)
            .options(selectinload(Quarto.hospedes))
            .filter(Quarto.numero == str(numero).strip())
            .first()
        )

    def contar_hospedes_ativos(self, db: Session, quarto_id: int, excluir_hospede_id: Optional[int] = None) -> int:
        query = db.query(Hospede).filter(Hospede.quarto_id == quarto_id, Hospede.ativo.is_(True))
        if excluir_hospede_id is not None:
            query = query.filter(Hospede.id != excluir_hospede_id)
        return query.count()

    # ---------- Cadastro ----------

    def criar_quarto(self, db: Session, numero: str, andar: int, categoria: str) -> Quarto:
        numero = (numero or "").strip()
        categoria = (categoria or "").strip()
        if not numero:
            raise ValidationError("Número do quarto é obrigatório")
        if andar is None or andar < 1:
            raise ValidationError("Andar deve ser um número maior que zero")
        if not categoria:
            raise ValidationError("Categoria do quarto é obrigatória")

        with transacao(db):
            if db.query(Quarto).filter(Quarto.numero == numero).first():
                raise BusinessError(f"Já existe um quarto com o número {numero}")

            quarto = Quarto(numero=numero, andar=andar, categoria=categoria, status=StatusQuarto.LIVRE)
            db.add(quarto)
            db.flush()

        log_event("quartos", None, "criar quarto", f"numero={numero}")
        return quarto

    def atualizar_quarto(
        self,
        db: Session,
        quarto_id: int,
        numero: Optional[str] = None,
        andar: Optional[int] = None,
        categoria: Optional[str] = None,
    ) -> Quarto:
        """Dados cadastrais apenas; status muda por atualizar_status"""
        with transacao(db):
            quarto = travar_linha(db, Quarto, quarto_id)
            if not quarto:
                raise NotFoundError("Quarto")

            if numero is not None:
                numero = numero.strip()
                if not numero:
                    raise ValidationError("Número do quarto não pode ser vazio")
                if numero != quarto.numero:
                    if db.query(Quarto).filter(Quarto.numero == numero).first():
                        raise BusinessError(f"Já existe um quarto com o número {numero}")
                    quarto.numero = numero

            if andar is not None:
                if andar < 1:
                    raise ValidationError("Andar deve ser um número maior que zero")
                quarto.andar = andar

            if categoria is not None:
                if not categoria.strip():
                    raise ValidationError("Categoria do quarto não pode ser vazia")
                quarto.categoria = categoria.strip()

            db.flush()

        log_event("quartos", None, "atualizar quarto", f"id={quarto_id}")
        return quarto

    def remover_quarto(self, db: Session, quarto_id: int) -> None:
        """Remoção definitiva: só quartos LIVRE e sem hóspedes ativos"""
        with transacao(db):
            quarto = travar_linha(db, Quarto, quarto_id)
            if not quarto:
                raise NotFoundError("Quarto")

            if quarto.status != StatusQuarto.LIVRE:
                raise BusinessError(
                    f"Não é possível remover o quarto {quarto.numero}. "
                    f"Status atual: {quarto.status.value}. Apenas quartos LIVRE podem ser removidos."
                )

            if self.contar_hospedes_ativos(db, quarto_id) > 0:
                raise BusinessError(
                    f"Não é possível remover o quarto {quarto.numero}: ainda possui hóspede ativo."
                )

            historico = db.query(Hospede).filter(Hospede.quarto_id == quarto_id).count()
            if historico:
                log_warning(
                    "quartos",
                    f"Quarto {quarto.numero} removido com {historico} registro(s) de hóspedes no histórico",
                )

            db.delete(quarto)

        log_event("quartos", None, "remover quarto", f"id={quarto_id}")

    # ---------- Status ----------

    def atualizar_status(self, db: Session, quarto_id: int, novo_status: StatusQuarto) -> Quarto:
        try:
            novo_status = StatusQuarto(novo_status)
        except ValueError:
            validos = ", ".join(s.value for s in StatusQuarto)
            raise BusinessError(f"Status inválido. Valores permitidos: {validos}")

        with transacao(db):
            quarto = travar_linha(db, Quarto, quarto_id)
            if not quarto:
                raise NotFoundError("Quarto")

            atual = quarto.status
            if atual == novo_status:
                return quarto

            if atual == StatusQuarto.OCUPADO and novo_status == StatusQuarto.LIVRE:
                raise BusinessError(
                    "Não é possível mudar um quarto OCUPADO diretamente para LIVRE. Primeiro mude para LIMPEZA."
                )

            if novo_status not in TRANSICOES_PERMITIDAS[atual]:
                raise BusinessError(f"Transição de {atual.value} para {novo_status.value} não permitida")

            if novo_status in (StatusQuarto.LIVRE, StatusQuarto.OCUPADO):
                if self.contar_hospedes_ativos(db, quarto_id) > 0:
                    raise BusinessError(
                        "Não é possível mudar o status de um quarto que ainda possui hóspede ativo. "
                        "Realize o checkout primeiro."
                    )

            quarto.status = novo_status
            quarto.atualizado_em = agora_negocio()

        log_event("quartos", None, "atualizar status", f"id={quarto_id} {atual.value}->{novo_status.value}")
        return quarto

    # ---------- Operações compostas (exigem transação aberta) ----------

    def validar_para_checkin(self, quarto: Quarto) -> None:
        if quarto.status not in STATUS_ACEITA_CHECKIN:
            raise BusinessError(
                f"Quarto {quarto.numero} não está disponível. Status atual: {quarto.status.value}."
            )

    def ocupar_na_transacao(self, db: Session, quarto_id: int) -> Quarto:
        """
        Marca OCUPADO somente se o quarto estiver LIVRE (UPDATE condicional).
        Um segundo check-in simultâneo no mesmo quarto encontra OCUPADO e segue.
        """
        db.query(Quarto).filter(
            Quarto.id == quarto_id,
            Quarto.status == StatusQuarto.LIVRE,
        ).update(
            {Quarto.status: StatusQuarto.OCUPADO, Quarto.atualizado_em: agora_negocio()},
            synchronize_session=False,
        )

        quarto = travar_linha(db, Quarto, quarto_id)
        if not quarto:
            raise NotFoundError("Quarto")
        if quarto.status != StatusQuarto.OCUPADO:
            self.validar_para_checkin(quarto)
        return quarto

    def liberar_apos_checkout_na_transacao(
        self, db: Session, quarto_id: int, hospede_id: int
    ) -> Tuple[int, str]:
        """
        Conta os outros hóspedes ativos do quarto (na mesma transação da desativação).
        Com ocupantes restantes o quarto continua OCUPADO; senão vai para LIMPEZA.
        Retorna (restantes, mensagem).
        """
        quarto = travar_linha(db, Quarto, quarto_id)
        if not quarto:
            return 0, "Quarto não encontrado; nenhum status alterado"

        restantes = self.contar_hospedes_ativos(db, quarto_id, excluir_hospede_id=hospede_id)
        if restantes > 0:
            return restantes, (
                f"Quarto {quarto.numero} permanece OCUPADO ({restantes} hóspede(s) restante(s))"
            )

        quarto.status = StatusQuarto.LIMPEZA
        quarto.atualizado_em = agora_negocio()
        return 0, f"Quarto {quarto.numero} liberado para LIMPEZA"
