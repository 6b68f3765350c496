from decimal import Decimal

import pytest

from lenspro.errors import AppError
from lenspro.pricing import Duration, price, rate_for

ITEM = {"id": 1, "name": "Sony A7 IV", "rate_12hr": Decimal("500"), "rate_24hr": Decimal("800")}


def test_rate_for_selects_rate_by_duration():
    assert rate_for(ITEM, Duration.TWELVE_HOURS) == Decimal("500")
    assert rate_for(ITEM, Duration.TWENTY_FOUR_HOURS) == Decimal("800")


def test_price_multiplies_rate_by_quantity():
    assert price(ITEM, "12hr", 1) == Decimal("500")
    assert price(ITEM, "24hr", 3) == Decimal("2400")


def test_price_keeps_fractional_rates_exact():
    item = dict(ITEM, rate_12hr=Decimal("199.99"))
    assert price(item, "12hr", 3) == Decimal("599.97")


def test_price_reads_attributes_from_objects():
    class Row:
        rate_12hr = Decimal("120.50")
        rate_24hr = Decimal("200")

    assert price(Row(), Duration.TWELVE_HOURS, 2) == Decimal("241.00")


@pytest.mark.parametrize("raw", ["48hr", "", None, "12"])
def test_duration_rejects_unknown_values(raw):
    with pytest.raises(AppError) as exc:
        Duration.parse(raw)
    assert exc.value.status_code == 400


def test_unknown_duration_is_priced_at_daily_rate():
    assert rate_for(ITEM, "48hr") == Decimal("800")
    assert price(ITEM, None, 2) == Decimal("1600")
