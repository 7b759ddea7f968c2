"""
Arquivo de inicialização do pacote models.
Expõe todas as classes para que SQLAlchemy (Base.metadata) as detecte ao importar 'models'.
"""

# 1. Equipe
from .usuario import Usuario

# 2. Quartos e hóspedes
from .quarto import Quarto
from .hospede import Hospede, Pagamento

# 3. Produtos, estoque e pedidos
from .produto import Produto, PerdaEstoque
from .pedido import Pedido

# 4. Caixa e financeiro
from .caixa import Caixa, LancamentoCaixa
from .financeiro import CategoriaFinanceira, ContaPagar, ContaReceber

__all__ = [
    "Usuario",
    "Quarto", "Hospede", "Pagamento",
    "Produto", "PerdaEstoque", "Pedido",
    "Caixa", "LancamentoCaixa",
    "CategoriaFinanceira", "ContaPagar", "ContaReceber",
]
