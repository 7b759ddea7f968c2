"""
Fixtures compartilhadas: banco SQLite em memória por teste, equipe,
produtos e quartos semeados, e um TestClient sobre create_app(storage)
"""
import sys
from decimal import Decimal
from pathlib import Path

# Adiciona o diretório raiz ao PYTHONPATH para os imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient

from database.conexion import LedgerStorage
from main import create_app
from models.enums import Cargo, SetorProduto, StatusQuarto
from models.produto import Produto
from models.quarto import Quarto
from models.usuario import Usuario
from services import Servicos
from utils.notificador import Notificador

PIN_GARCOM = "1111"
PIN_GERENTE = "2222"
PIN_ADMIN = "3333"


@pytest.fixture
def storage():
    storage = LedgerStorage("sqlite://", echo=False)
    storage.create_all()
    yield storage
    storage.dispose()


@pytest.fixture
def db(storage):
    session = storage.session()
    yield session
    session.close()


@pytest.fixture
def notificador():
    return Notificador()


@pytest.fixture
def servicos(notificador):
    return Servicos(notificador)


@pytest.fixture
def usuarios(db):
    garcom = Usuario(nome="Garçom Teste", pin=PIN_GARCOM, cargo=Cargo.WAITER)
    gerente = Usuario(nome="Gerente Teste", pin=PIN_GERENTE, cargo=Cargo.MANAGER)
    admin = Usuario(nome="Admin Teste", pin=PIN_ADMIN, cargo=Cargo.ADMIN)
    db.add_all([garcom, gerente, admin])
    db.commit()
    return {"garcom": garcom, "gerente": gerente, "admin": admin}


@pytest.fixture
def produtos(db):
    cerveja = Produto(nome="Cerveja", preco=Decimal("15.00"), estoque=10, setor=SetorProduto.BAR_PISCINA)
    hamburguer = Produto(nome="Hambúrguer", preco=Decimal("32.50"), estoque=3, setor=SetorProduto.COZINHA)
    agua = Produto(nome="Água", preco=Decimal("5.00"), estoque=0, setor=SetorProduto.BAR_PISCINA)
    db.add_all([cerveja, hamburguer, agua])
    db.commit()
    return {"cerveja": cerveja, "hamburguer": hamburguer, "agua": agua}


@pytest.fixture
def quartos(db):
    q101 = Quarto(numero="101", andar=1, categoria="Standard", status=StatusQuarto.LIVRE)
    q102 = Quarto(numero="102", andar=1, categoria="Standard", status=StatusQuarto.LIVRE)
    q201 = Quarto(numero="201", andar=2, categoria="Luxo", status=StatusQuarto.MANUTENCAO)
    db.add_all([q101, q102, q201])
    db.commit()
    return {"101": q101, "102": q102, "201": q201}


@pytest.fixture
def client(storage, notificador, usuarios, produtos, quartos):
    app = create_app(storage, notificador)
    return TestClient(app)


@pytest.fixture
def checkin_day_use(db, servicos):
    """Cria um hóspede Day Use ativo com pulseira"""
    def _criar(nome="Maria", uid="NFC-001", limite=None, entrada=None, documento="123.456.789-00"):
        return servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome=nome,
            documento=documento,
            uid_pulseira=uid,
            limite_gasto=limite,
            valor_entrada=entrada,
        )
    return _criar
