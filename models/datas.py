# Conversão das datas ISO 8601 enviadas pelo serviço
from datetime import datetime


def ler_data(texto):
    """Converte '2024-05-01T10:00:00Z' em datetime no fuso local; None se ausente ou inválido"""
    if not texto:
        return None
    try:
        valor = datetime.fromisoformat(texto.replace('Z', '+00:00'))
    except ValueError:
        return None
    if valor.tzinfo is not None:
        valor = valor.astimezone().replace(tzinfo=None)
    return valor


def formatar_data_br(valor):
    """Formata no padrão brasileiro (dd/mm/aaaa hh:mm:ss)"""
    if valor is None:
        return '-'
    if isinstance(valor, str):
        valor = ler_data(valor)
        if valor is None:
            return '-'
    return valor.strftime('%d/%m/%Y %H:%M:%S')
