import json
from dataclasses import dataclass

from medibook.domain import CartItem, Medicine
from medibook.logging_config import get_logger
from medibook.context.observable import Observable

logger = get_logger(__name__)

CART_STORAGE_KEY = "medibook.cart"

# the cart shares the session cookie with the login, so only these fields are kept
SNAPSHOT_FIELDS = ("id", "name", "price", "stock")


def _snapshot(item):
    medicine = {field: getattr(item.medicine, field) for field in SNAPSHOT_FIELDS}
    return {"medicine": medicine, "quantity": item.quantity}


@dataclass
class CartChange:
    """Outcome of a quantity change, so the caller can tell the user about clamping."""
    medicine_id: str
    requested: int
    quantity: int
    clamped: bool = False
    refused: bool = False


class CartContext(Observable):
    """
    Medicine id -> CartItem, with quantities kept within [1, stock].

    Every mutation writes the whole cart back to the storage mapping before
    listeners are notified.
    """

    def __init__(self, storage, key=CART_STORAGE_KEY):
        super().__init__()
        self._storage = storage
        self._key = key
        self._items = {}
        self._load()

    def _load(self):
        raw = self._storage.get(self._key)
        if not raw:
            return
        try:
            for entry in json.loads(raw):
                medicine = Medicine.from_dict(entry["medicine"])
                self._items[medicine.id] = CartItem(medicine=medicine, quantity=int(entry["quantity"]))
        except (TypeError, ValueError, KeyError) as e:
            logger.warning("cart_snapshot_unreadable", error=str(e))
            self._items = {}

    def _persist(self):
        self._storage[self._key] = json.dumps([_snapshot(item) for item in self._items.values()])
        self._notify()

    @property
    def items(self):
        return list(self._items.values())

    def get(self, medicine_id):
        return self._items.get(medicine_id)

    def add_item(self, medicine, quantity=1):
        existing = self._items.get(medicine.id)
        current = existing.quantity if existing else 0

        if quantity <= 0:
            return CartChange(medicine.id, quantity, current)
        if medicine.stock < 1:
            return CartChange(medicine.id, quantity, current, refused=True)

        wanted = current + quantity
        new_quantity = min(wanted, medicine.stock)
        if existing:
            existing.medicine = medicine
            existing.quantity = new_quantity
        else:
            self._items[medicine.id] = CartItem(medicine=medicine, quantity=new_quantity)
        self._persist()
        return CartChange(medicine.id, quantity, new_quantity, clamped=new_quantity < wanted)

    def update_quantity(self, medicine_id, quantity):
        if quantity <= 0:
            self.remove_item(medicine_id)
            return CartChange(medicine_id, quantity, 0)

        item = self._items.get(medicine_id)
        if item is None:
            return CartChange(medicine_id, quantity, 0)

        if item.medicine.stock < 1:
            self.remove_item(medicine_id)
            return CartChange(medicine_id, quantity, 0, refused=True)

        item.quantity = min(quantity, item.medicine.stock)
        self._persist()
        return CartChange(medicine_id, quantity, item.quantity, clamped=item.quantity < quantity)

    def remove_item(self, medicine_id):
        if self._items.pop(medicine_id, None) is not None:
            self._persist()

    def clear(self):
        self._items = {}
        self._persist()

    @property
    def total(self):
        return sum(item.medicine.price * item.quantity for item in self._items.values())

    @property
    def item_count(self):
        return sum(item.quantity for item in self._items.values())

    def is_empty(self):
        return not self._items
