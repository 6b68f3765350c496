"""Shopping cart kept in a browser-scoped key-value store.

The whole cart is serialised to JSON and written under a single key after
every mutation, so a reload rebuilds exactly the same lines. Line totals are
never stored independently: ``CartLine.total_cost`` is derived from the
line's rate, duration and quantity every time it is read.
"""
import json
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal, InvalidOperation

from lenspro.errors import AppError
from lenspro.pricing import Duration, price

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquipmentSnapshot:
    id: int
    name: str
    rate_12hr: Decimal
    rate_24hr: Decimal
    description: str = None
    image_url: str = None

    @classmethod
    def from_item(cls, item):
        if isinstance(item, EquipmentSnapshot):
            return item
        if isinstance(item, dict):
            get = item.get
        else:
            def get(name, default=None):
                return getattr(item, name, default)
        return cls(
            id=int(get("id")),
            name=get("name") or "",
            rate_12hr=Decimal(str(get("rate_12hr") or 0)),
            rate_24hr=Decimal(str(get("rate_24hr") or 0)),
            description=get("description"),
            image_url=get("image_url"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "rate_12hr": str(self.rate_12hr),
            "rate_24hr": str(self.rate_24hr),
            "description": self.description,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class CartLine:
    equipment: EquipmentSnapshot
    duration: Duration
    rent_date: str
    return_date: str
    quantity: int = 1

    @property
    def equipment_id(self):
        return self.equipment.id

    @property
    def total_cost(self):
        return price(self.equipment, self.duration, self.quantity)

    def to_dict(self):
        return {
            "equipment": self.equipment.to_dict(),
            "duration": self.duration.value,
            "rent_date": self.rent_date,
            "return_date": self.return_date,
            "quantity": self.quantity,
            "total_cost": str(self.total_cost),
        }

    @classmethod
    def from_dict(cls, raw):
        quantity = int(raw["quantity"])
        if quantity <= 0:
            raise ValueError("non-positive quantity in stored cart line")
        return cls(
            equipment=EquipmentSnapshot.from_item(raw["equipment"]),
            duration=Duration(raw["duration"]),
            rent_date=str(raw["rent_date"]),
            return_date=str(raw["return_date"]),
            quantity=quantity,
        )


def _parse_dates(rent_date, return_date):
    try:
        start = date.fromisoformat(str(rent_date))
        end = date.fromisoformat(str(return_date))
    except ValueError as exc:
        raise AppError("Rent and return dates must be valid dates (YYYY-MM-DD).", 400) from exc
    if end < start:
        raise AppError("Return date cannot be before the rent date.", 400)
    return start.isoformat(), end.isoformat()


@dataclass
class CartStore:
    storage: object
    key: str = "lenspro-cart"
    _lines: dict = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._lines = self._load()

    @property
    def lines(self):
        return tuple(self._lines.values())

    def __len__(self):
        return len(self._lines)

    def __bool__(self):
        return bool(self._lines)

    def get_line(self, item_id):
        return self._lines.get(int(item_id))

    def add_to_cart(self, item, duration, rent_date, return_date):
        snapshot = EquipmentSnapshot.from_item(item)
        duration = Duration.parse(duration)
        rent_date, return_date = _parse_dates(rent_date, return_date)

        existing = self._lines.get(snapshot.id)
        if existing is not None:
            line = replace(
                existing,
                equipment=snapshot,
                duration=duration,
                rent_date=rent_date,
                return_date=return_date,
                quantity=existing.quantity + 1,
            )
        else:
            line = CartLine(snapshot, duration, rent_date, return_date, quantity=1)
        self._lines[snapshot.id] = line
        self._persist()
        return line

    def update_quantity(self, item_id, quantity):
        quantity = int(quantity)
        if quantity <= 0:
            self.remove_from_cart(item_id)
            return None
        line = self._lines.get(int(item_id))
        if line is None:
            return None
        line = replace(line, quantity=quantity)
        self._lines[line.equipment_id] = line
        self._persist()
        return line

    def remove_from_cart(self, item_id):
        self._lines.pop(int(item_id), None)
        self._persist()

    def clear_cart(self):
        self._lines = {}
        self._persist()

    def get_total_cost(self):
        return sum((line.total_cost for line in self._lines.values()), Decimal("0"))

    def get_item_count(self):
        return sum(line.quantity for line in self._lines.values())

    def snapshot(self):
        return json.dumps([line.to_dict() for line in self._lines.values()])

    def restore(self, serialized):
        self._lines = self._decode(serialized)
        self._persist()

    def to_dict(self):
        return {
            "items": [line.to_dict() for line in self._lines.values()],
            "total_cost": str(self.get_total_cost()),
            "item_count": self.get_item_count(),
        }

    def _persist(self):
        self.storage[self.key] = self.snapshot()

    def _load(self):
        raw = self.storage.get(self.key)
        if not raw:
            return {}
        try:
            return self._decode(raw)
        except (TypeError, ValueError, KeyError, InvalidOperation) as exc:
            log.warning("Discarding unreadable cart snapshot under %r: %s", self.key, exc)
            self.storage.pop(self.key, None)
            return {}

    @staticmethod
    def _decode(serialized):
        rows = json.loads(serialized)
        if not isinstance(rows, list):
            raise ValueError("cart snapshot is not a list")
        lines = {}
        for raw in rows:
            line = CartLine.from_dict(raw)
            lines[line.equipment_id] = line
        return lines
