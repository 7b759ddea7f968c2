"""
Tipos de coluna compartilhados pelos modelos
"""
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from utils.timezone import to_business_time


class DataHoraFuso(TypeDecorator):
    """
    Data/hora sempre no fuso do negócio, na escrita e na leitura.
    O SQLite descarta o offset e devolve horário de parede naive; o Postgres
    devolve aware no fuso da sessão. Nos dois casos o valor lido é igual ao gravado.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return to_business_time(value)

    def process_result_value(self, value, dialect):
        return to_business_time(value)
