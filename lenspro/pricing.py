from decimal import Decimal
from enum import Enum

from lenspro.errors import AppError


class Duration(str, Enum):
    TWELVE_HOURS = "12hr"
    TWENTY_FOUR_HOURS = "24hr"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError as exc:
            raise AppError("Duration must be 12hr or 24hr.", 400) from exc


def _rate(item, name):
    if isinstance(item, dict):
        raw = item.get(name)
    else:
        raw = getattr(item, name)
    return Decimal(str(raw or 0))


def rate_for(item, duration):
    # Anything other than 12hr is priced at the 24hr rate.
    if duration == Duration.TWELVE_HOURS:
        return _rate(item, "rate_12hr")
    return _rate(item, "rate_24hr")


def price(item, duration, quantity):
    return rate_for(item, duration) * Decimal(int(quantity))
