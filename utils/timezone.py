from datetime import date, datetime
from typing import Optional

import pytz

import config

# Fuso centralizado do negócio (America/Sao_Paulo, UTC-3 sem horário de verão)
BUSINESS_TIMEZONE_STR = config.BUSINESS_TIMEZONE
BUSINESS_TZ = pytz.timezone(BUSINESS_TIMEZONE_STR)


def agora_negocio() -> datetime:
    """Data/hora atual no fuso do negócio; usada em todo timestamp com valor legal"""
    return datetime.now(BUSINESS_TZ)


def hoje_negocio() -> date:
    """Data civil de hoje no fuso do negócio"""
    return agora_negocio().date()


def to_business_time(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Converte um datetime para o fuso do negócio.
    Naive é lido como horário de parede do negócio (SQLite descarta o offset ao gravar).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return BUSINESS_TZ.localize(dt)
    return dt.astimezone(BUSINESS_TZ)


def formatar_data_hora(dt: datetime) -> str:
    """Formato brasileiro: DD/MM/YYYY HH:mm:ss"""
    return to_business_time(dt).strftime("%d/%m/%Y %H:%M:%S")


def inicio_do_dia(dia: date) -> datetime:
    return BUSINESS_TZ.localize(datetime(dia.year, dia.month, dia.day, 0, 0, 0))


def fim_do_dia(dia: date) -> datetime:
    return BUSINESS_TZ.localize(datetime(dia.year, dia.month, dia.day, 23, 59, 59, 999999))
