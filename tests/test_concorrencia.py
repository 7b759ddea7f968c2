"""
Dois pedidos simultâneos para o mesmo hóspede Day Use: o incremento
relativo da dívida + releitura garante que no máximo um passa do limite
"""
import threading
from decimal import Decimal

from database.conexion import LedgerStorage
from models.enums import SetorProduto, StatusPedido
from models.hospede import Hospede
from models.pedido import Pedido
from models.produto import Produto
from services import ItemPedido, Servicos
from utils.erros import ForbiddenError


def test_day_use_dois_pedidos_simultaneos_respeitam_limite(tmp_path):
    """Dívida inicial 80 e não 90: com 90 + 15 a pré-checagem já recusa antes da corrida"""
    storage = LedgerStorage(f"sqlite:///{tmp_path / 'concorrencia.db'}", echo=False)
    storage.create_all()
    servicos = Servicos()

    with storage.session() as db:
        caipirinha = Produto(nome="Caipirinha", preco=Decimal("15.00"), estoque=10, setor=SetorProduto.BAR_PISCINA)
        db.add(caipirinha)
        db.commit()
        produto_id = caipirinha.id

        hospede = servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome="Ana",
            documento="987.654.321-00",
            uid_pulseira="NFC-CONC",
            limite_gasto=Decimal("100"),
            valor_entrada=Decimal("80"),
        )
        hospede_id = hospede.id

    barreira = threading.Barrier(2)
    resultados = []
    trava = threading.Lock()

    def pedir():
        session = storage.session()
        try:
            barreira.wait()
            servicos.pedidos.criar_pedidos(session, hospede_id, [ItemPedido(produto_id, 1)])
            resultado = "ok"
        except ForbiddenError:
            resultado = "limite"
        finally:
            session.close()
        with trava:
            resultados.append(resultado)

    threads = [threading.Thread(target=pedir) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert sorted(resultados) == ["limite", "ok"]

    with storage.session() as db:
        assert db.get(Hospede, hospede_id).divida_atual == Decimal("95.00")
        assert db.get(Produto, produto_id).estoque == 9
        pendentes = (
            db.query(Pedido)
            .filter(Pedido.hospede_id == hospede_id, Pedido.status == StatusPedido.PENDENTE)
            .count()
        )
        assert pendentes == 1

    storage.dispose()
