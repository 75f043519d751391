from .catalog import Product, ProductImage, SalesOutlet, StockItem
from .orders import Order, OrderItem, DEFAULT_ORDER_STATUS
from .auth import User, SessionToken

__all__ = [
    'Product', 'ProductImage', 'SalesOutlet', 'StockItem',
    'Order', 'OrderItem', 'DEFAULT_ORDER_STATUS',
    'User', 'SessionToken',
]
