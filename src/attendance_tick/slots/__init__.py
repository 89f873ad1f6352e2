from .catalog import SlotCatalog
from .model import Slot

__all__ = ["Slot", "SlotCatalog"]
