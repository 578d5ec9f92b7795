# utils/helpers.py
from datetime import date, datetime
import logging
from typing import Union, Optional

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def iso_date(v) -> Optional[str]:
    """
    Normalize a calendar date to 'YYYY-MM-DD'.

    Accepts date/datetime objects or ISO strings; empty values give None.
    No timezone handling: documents carry plain calendar dates.
    """
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    return date.fromisoformat(str(v).strip()[:10]).isoformat()


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    This is the only place totals get rounded; stored and accumulated values
    keep full precision.

    Behavior on parse failure:
      - By default returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError.
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"


def fmt_currency(v: NumberLike, symbol: str = "$") -> str:
    """fmt_money with a leading currency symbol, as shown on the forms."""
    return f"{symbol}{fmt_money(v)}"
