"""RoomieRules: shared household bills, receipts and house rules."""

__version__ = "0.1.0"
