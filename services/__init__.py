"""
Serviços de negócio do PDV
"""
from typing import Optional

from utils.notificador import Notificador

from .caixa_service import CaixaService
from .estoque_service import EstoqueService
from .financeiro_service import FinanceiroService
from .hospede_service import HospedeService
from .pedido_service import ItemPedido, PedidoService
from .produto_service import ProdutoService
from .quarto_service import QuartoService
from .usuario_service import UsuarioService


class Servicos:
    """Grafo de serviços montado uma vez no start do processo"""

    def __init__(self, notificador: Optional[Notificador] = None):
        self.notificador = notificador or Notificador()
        self.usuarios = UsuarioService()
        self.quartos = QuartoService()
        self.produtos = ProdutoService()
        self.caixa = CaixaService()
        self.estoque = EstoqueService(self.produtos)
        self.pedidos = PedidoService(self.notificador, self.usuarios, self.produtos)
        self.hospedes = HospedeService(self.quartos, self.caixa, self.produtos)
        self.financeiro = FinanceiroService(self.caixa)


__all__ = [
    "Servicos",
    "CaixaService",
    "EstoqueService",
    "FinanceiroService",
    "HospedeService",
    "ItemPedido",
    "PedidoService",
    "ProdutoService",
    "QuartoService",
    "UsuarioService",
]
