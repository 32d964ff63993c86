from __future__ import annotations


class StorageUnavailableError(RuntimeError):
    """Raised when the order store cannot be read or written."""


class OutOfStockError(ValueError):
    def __init__(self, product_name: str):
        super().__init__(f"insufficient stock for product {product_name}")
        self.product_name = product_name
