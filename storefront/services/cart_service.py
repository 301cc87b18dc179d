import json
import logging
import re
from pathlib import Path
from typing import Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from storefront.config import get_settings
from storefront.core.constants import SOURCE_PRODUCT
from storefront.schemas.cart import CartItem, CartItemBase

logger = logging.getLogger(__name__)

_CART_ITEMS = TypeAdapter(list[CartItem])
_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]+")


class CartStorage(Protocol):
    def load(self, key: str) -> list: ...

    def save(self, key: str, items: list) -> None: ...


class InMemoryCartStorage:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> list:
        raw = self._data.get(key)
        return json.loads(raw) if raw else []

    def save(self, key: str, items: list) -> None:
        self._data[key] = json.dumps(items)


class JsonFileCartStorage:
    """One JSON document per storage key under `directory`."""

    def __init__(self, directory) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe_key = _SAFE_KEY.sub("_", key).strip("._") or "cart"
        return self.directory / "{}.json".format(safe_key)

    def load(self, key: str) -> list:
        path = self._path(key)
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def save(self, key: str, items: list) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(items, ensure_ascii=True), encoding="utf-8")
        tmp_path.replace(path)


class Cart:
    """Shopping cart that writes itself through `storage` on every change."""

    def __init__(self, storage: CartStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or get_settings().CART_STORAGE_KEY
        self._items: list[CartItem] = self._load()

    def _load(self) -> list[CartItem]:
        try:
            return _CART_ITEMS.validate_python(self.storage.load(self.key))
        except (OSError, ValueError, ValidationError):
            logger.warning("Discarding unreadable cart for key %s", self.key)
            return []

    def _save(self) -> None:
        self.storage.save(self.key, [item.model_dump() for item in self._items])

    def _find(self, product_id, source):
        for item in self._items:
            if item.line_key == (source, product_id):
                return item
        return None

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def add(self, item: CartItemBase, qty: int = 1) -> CartItem:
        existing = self._find(item.id, item.source)
        if existing is not None:
            existing.quantity += qty
            line = existing
        else:
            line = CartItem(**item.model_dump(exclude={"quantity"}), quantity=qty)
            self._items.append(line)
        self._save()
        return line

    def remove(self, product_id, source=SOURCE_PRODUCT) -> None:
        self._items = [item for item in self._items if item.line_key != (source, product_id)]
        self._save()

    def update_quantity(self, product_id, qty: int, source=SOURCE_PRODUCT) -> None:
        if qty <= 0:
            self.remove(product_id, source)
            return
        existing = self._find(product_id, source)
        if existing is None:
            return
        existing.quantity = qty
        self._save()

    def clear(self) -> None:
        self._items = []
        self._save()

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> float:
        return sum(item.line_total for item in self._items)

    @property
    def total_mrp(self) -> float:
        return sum(item.mrp * item.quantity for item in self._items)

    @property
    def has_coming_soon(self) -> bool:
        return any(item.coming_soon for item in self._items)


def default_cart_storage() -> JsonFileCartStorage:
    return JsonFileCartStorage(get_settings().CART_STORAGE_DIR)


__all__ = [
    "Cart",
    "CartStorage",
    "InMemoryCartStorage",
    "JsonFileCartStorage",
    "default_cart_storage",
]
