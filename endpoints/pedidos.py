"""
Endpoints de pedidos (garçom, quiosque NFC e cozinha/bar)
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from models.enums import MetodoCriacao, StatusPedido
from schemas.comum import Pagina
from schemas.pedido import (
    CancelarPedidoRequest, PedidoManualRequest, PedidoNfcRequest, PedidoResponse, PedidoStatusUpdate
)
from services import ItemPedido, Servicos
from utils.dependencies import Identidade, get_db, get_identidade, get_servicos

router = APIRouter(prefix="/api/pedidos", tags=["pedidos"])


def _operador(identidade: Optional[Identidade]) -> Optional[int]:
    return identidade.operador_id if identidade else None


@router.post("/nfc", response_model=List[PedidoResponse], status_code=status.HTTP_201_CREATED)
def criar_pedidos_nfc(
    dados: PedidoNfcRequest,
    identidade: Optional[Identidade] = Depends(get_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    itens = [ItemPedido(i.produto_id, i.quantidade) for i in dados.itens]
    return servicos.pedidos.criar_pedidos_nfc(db, dados.uid_pulseira, itens, _operador(identidade))


@router.post("/manual", response_model=List[PedidoResponse], status_code=status.HTTP_201_CREATED)
def criar_pedidos_manual(
    dados: PedidoManualRequest,
    identidade: Optional[Identidade] = Depends(get_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    itens = [ItemPedido(i.produto_id, i.quantidade) for i in dados.itens]
    return servicos.pedidos.criar_pedidos_manual(
        db, dados.hospede_id, itens, dados.manager_pin, _operador(identidade)
    )


@router.get("", response_model=Pagina[PedidoResponse])
def listar_pedidos(
    filtro_status: Optional[StatusPedido] = Query(None, alias="status"),
    hospede_id: Optional[int] = None,
    metodo_criacao: Optional[MetodoCriacao] = None,
    usuario_id: Optional[int] = None,
    busca: Optional[str] = None,
    recente: bool = False,
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.pedidos.listar_pedidos(
        db,
        status=filtro_status,
        page=page,
        limit=limit,
        busca=busca,
        hospede_id=hospede_id,
        metodo_criacao=metodo_criacao,
        usuario_id=usuario_id,
        recente=recente,
    )


@router.get("/periodo", response_model=List[PedidoResponse])
def listar_pedidos_periodo(
    inicio: date,
    fim: date,
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    """Consulta usada pela exportação de relatórios"""
    return servicos.pedidos.listar_pedidos_periodo(db, inicio, fim)


@router.get("/{pedido_id}", response_model=PedidoResponse)
def obter_pedido(pedido_id: int, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    return servicos.pedidos.buscar_pedido(db, pedido_id)


@router.patch("/{pedido_id}/status", response_model=PedidoResponse)
def atualizar_status_pedido(
    pedido_id: int,
    dados: PedidoStatusUpdate,
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.pedidos.atualizar_status(db, pedido_id, dados.status)


@router.post("/{pedido_id}/cancelar", response_model=PedidoResponse)
def cancelar_pedido(
    pedido_id: int,
    dados: CancelarPedidoRequest,
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.pedidos.cancelar_com_pin(db, pedido_id, dados.manager_pin)
