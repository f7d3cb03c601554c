# backend/smartstock/services/products_service.py
"""
Product Registry

Owns product identity and the current record for every product. Records are
immutable; the stock operations publish replacements through the
registry's write methods while holding that product's lock
(see ``locks.lock_for``). Readers never take a lock: a dict lookup returns
either the previous or the next record, never a half-written one.
"""
from __future__ import annotations

import threading

from ..models import Product
from ..validation import NotFoundError
from .concurrency import AtomicCounter, KeyedLocks


class ProductRegistry:
    def __init__(self):
        self._ids = AtomicCounter()
        self._write_lock = threading.Lock()
        self._products: dict[int, Product] = {}
        self.locks = KeyedLocks()

    # -- writes (stock operations only) -----------------------------------

    def allocate_id(self) -> int:
        return self._ids.next()

    def publish(self, product: Product) -> None:
        """Insert or replace the record for product.id."""
        with self._write_lock:
            self._products[product.id] = product

    def remove(self, product_id: int) -> None:
        with self._write_lock:
            self._products.pop(product_id, None)

    # -- reads ------------------------------------------------------------

    def find(self, product_id: int) -> Product | None:
        return self._products.get(product_id)

    def get(self, product_id: int) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    def exists(self, product_id: int) -> bool:
        return product_id in self._products

    def all(self) -> list[Product]:
        """Snapshot of every product, ordered by id."""
        with self._write_lock:
            products = list(self._products.values())
        return sorted(products, key=lambda p: p.id)

    def by_category(self, category: str) -> list[Product]:
        wanted = (category or "").lower()
        return [p for p in self.all() if p.category.lower() == wanted]

    def search_by_name(self, term: str) -> list[Product]:
        needle = (term or "").lower()
        return [p for p in self.all() if needle in p.name.lower()]

    def low_stock(self) -> list[Product]:
        return sorted((p for p in self.all() if p.is_low_stock), key=lambda p: p.current_stock)

    def out_of_stock(self) -> list[Product]:
        return [p for p in self.all() if p.current_stock == 0]

    def categories(self) -> list[str]:
        return sorted({p.category for p in self.all()})

    def suppliers(self) -> list[str]:
        return sorted({p.supplier for p in self.all()})

    def __len__(self) -> int:
        return len(self._products)
