from .user import User, UserRole, JobType
from .item import Item, ItemCategory
from .incoming import IncomingShipment, IncomingShipmentLine, SerializedUnit
from .outgoing import OutgoingShipment, OutgoingShipmentLine, OutgoingStatus

__all__ = [n for n in dir() if n[:1].isupper()]
