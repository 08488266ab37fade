from .base import BaseObject, Capability, NotAvailable, NotLoaded


__all__ = ["NotLoaded", "NotAvailable", "BaseObject", "Capability"]
