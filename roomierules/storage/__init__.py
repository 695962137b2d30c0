"""Filesystem storage for uploaded receipt images."""

from roomierules.storage.receipts import ReceiptStorage, StoredReceipt

__all__ = ["ReceiptStorage", "StoredReceipt"]
