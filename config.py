"""
Configuração do PDV / livro-caixa do hotel
Lê variáveis de ambiente (.env): banco de dados, fuso horário e segurança
"""
import os
from decimal import Decimal
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(nome: str, padrao: str = "false") -> bool:
    return os.getenv(nome, padrao).lower().strip('"').strip("'") in ("true", "1", "yes", "on")


def _montar_database_url() -> str:
    """Usa DATABASE_URL se existir; com DB_HOST monta a URL do Postgres (psycopg)"""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        return (
            f"postgresql+psycopg://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}"
            f"@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
        )
    return "sqlite:///./pdv_hotel.db"


# Banco de dados
DATABASE_URL = _montar_database_url()
DB_ECHO = _env_bool("DB_ECHO")

# Fuso horário do negócio (timestamps com valor legal)
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/Sao_Paulo")

# JWT (apenas verificação; a emissão de tokens fica fora deste serviço)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "troque-esta-chave-em-producao")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "pdv_hotel_logs.txt")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Produtos de serviço (não representam estoque físico)
DAY_USE_PRODUCT_NAME = os.getenv("DAY_USE_PRODUCT_NAME", "Day Use")
DIARIA_PRODUCT_NAME = os.getenv("DIARIA_PRODUCT_NAME", "Diária")
SERVICE_PRODUCT_STOCK = int(os.getenv("SERVICE_PRODUCT_STOCK", "999999"))

# Tolerância de conciliação no checkout (1 centavo)
RECONCILIATION_TOLERANCE = Decimal(os.getenv("RECONCILIATION_TOLERANCE", "0.01"))

# Estoque baixo (listagem de produtos)
LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))

# CORS
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
