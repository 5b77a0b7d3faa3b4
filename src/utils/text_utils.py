# src/utils/text_utils.py
import datetime
import re
from decimal import Decimal
from typing import Tuple, Union

_CENTS_RE = re.compile(r"\d+")
_DOLLARS_RE = re.compile(r"\d+\.\d{1,2}")
_YEAR_RE = re.compile(r"\d{4}")
_MONTH_RE = re.compile(r"\d{4}-\d{2}")
_DAY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Limite da coluna integer do Postgres
MAX_AMOUNT_CENTS = 2147483647


def quote_filter_value(value: str) -> str:
    """Coloca o valor entre aspas duplas para uso em filtros do PostgREST (or=, in=).
    Vírgulas, pontos e parênteses dentro das aspas não quebram a expressão.
    Ex: 'a,b' -> '"a,b"'
    Ex: 'diz "oi"' -> '"diz \\"oi\\""'
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def escape_like(value: str) -> str:
    """Escapa os curingas do LIKE (\\, % e _) para que sejam buscados literalmente.
    Ex: "50%" -> "50\\%"
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def ilike_pattern(query: str) -> str:
    """Padrão de substring case-insensitive, já entre aspas.
    Ex: "acme" -> '"*acme*"'
    Ex: "%" -> '"*\\\\%*"'
    """
    return quote_filter_value(f"*{escape_like(query)}*")


def parse_amount_cents(query: str) -> Union[int, None]:
    """
    Interpreta o texto de busca como um valor de fatura em centavos.
    Ex: "15795" -> 15795 (centavos)
    Ex: "157.95" -> 15795 (dólares)
    Ex: "abc" -> None
    Ex: "5551234567890" -> None (fora do limite da coluna)
    """
    text = query.strip()
    if _CENTS_RE.fullmatch(text):
        cents = int(text)
    elif _DOLLARS_RE.fullmatch(text):
        cents = int(Decimal(text) * 100)
    else:
        return None
    if cents > MAX_AMOUNT_CENTS:
        return None
    return cents


def _add_months(day: datetime.date, months: int) -> datetime.date:
    month_index = day.month - 1 + months
    return day.replace(year=day.year + month_index // 12, month=month_index % 12 + 1)


def parse_date_range(query: str) -> Union[Tuple[datetime.date, datetime.date], None]:
    """
    Interpreta o texto de busca como um período [início, fim).
    Ex: "2023" -> (2023-01-01, 2024-01-01)
    Ex: "2023-06" -> (2023-06-01, 2023-07-01)
    Ex: "2023-06-05" -> (2023-06-05, 2023-06-06)
    Datas inválidas (ex: "2023-13") retornam None.
    """
    text = query.strip()
    try:
        if _DAY_RE.fullmatch(text):
            start = datetime.date.fromisoformat(text)
            return start, start + datetime.timedelta(days=1)
        if _MONTH_RE.fullmatch(text):
            start = datetime.date.fromisoformat(f"{text}-01")
            return start, _add_months(start, 1)
        if _YEAR_RE.fullmatch(text):
            start = datetime.date(int(text), 1, 1)
            return start, _add_months(start, 12)
    except ValueError:
        return None
    return None
