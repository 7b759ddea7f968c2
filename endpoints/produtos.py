"""
Endpoints de produtos e baixa técnica de estoque
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from schemas.comum import Pagina
from schemas.produto import (
    AdicionarEstoqueRequest, BaixaCreate, BaixaResponse, ProdutoCreate, ProdutoResponse, ProdutoUpdate
)
from services import Servicos
from utils.dependencies import Identidade, get_db, get_servicos, require_identidade, require_manager

router = APIRouter(prefix="/api/produtos", tags=["produtos"])
estoque_router = APIRouter(prefix="/api/estoque", tags=["estoque"])


@router.get("", response_model=Pagina[ProdutoResponse])
def listar_produtos(
    categoria: Optional[str] = None,
    busca: Optional[str] = None,
    estoque_baixo: bool = False,
    apenas_disponiveis: bool = False,
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.produtos.listar_produtos(
        db,
        categoria=categoria,
        page=page,
        limit=limit,
        busca=busca,
        estoque_baixo=estoque_baixo,
        apenas_disponiveis=apenas_disponiveis,
    )


@router.get("/{produto_id}", response_model=ProdutoResponse)
def obter_produto(produto_id: int, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    return servicos.produtos.buscar_produto(db, produto_id)


@router.post("", response_model=ProdutoResponse, status_code=status.HTTP_201_CREATED)
def criar_produto(
    dados: ProdutoCreate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.produtos.criar_produto(db, **dados.model_dump())


@router.put("/{produto_id}", response_model=ProdutoResponse)
def atualizar_produto(
    produto_id: int,
    dados: ProdutoUpdate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.produtos.atualizar_produto(db, produto_id, **dados.model_dump(exclude_unset=True))


@router.post("/{produto_id}/estoque", response_model=ProdutoResponse)
def adicionar_estoque(
    produto_id: int,
    dados: AdicionarEstoqueRequest,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.produtos.adicionar_estoque(db, produto_id, dados.quantidade)


@router.delete("/{produto_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_produto(
    produto_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    servicos.produtos.deletar_produto(db, produto_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========== BAIXA TÉCNICA ==========

@estoque_router.post("/baixas", response_model=BaixaResponse, status_code=status.HTTP_201_CREATED)
def registrar_baixa(
    dados: BaixaCreate,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.estoque.registrar_baixa(
        db, dados.produto_id, dados.quantidade, dados.motivo, dados.observacao, identidade.operador_id
    )


@estoque_router.get("/baixas", response_model=Pagina[BaixaResponse])
def listar_baixas(
    produto_id: Optional[int] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    page: int = Query(1),
    limit: int = Query(50),
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.estoque.listar_baixas(
        db, produto_id=produto_id, page=page, limit=limit, data_inicio=data_inicio, data_fim=data_fim
    )
