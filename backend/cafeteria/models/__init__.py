from .auth import User, SessionToken
from .security import SecurityEvent
from .menu import MenuItem
from .orders import Order, OrderItem
from .wallet import Transaction
from .inventory import InventoryItem, WasteRecord

__all__ = [
    'User', 'SessionToken', 'SecurityEvent',
    'MenuItem',
    'Order', 'OrderItem',
    'Transaction',
    'InventoryItem', 'WasteRecord',
]
