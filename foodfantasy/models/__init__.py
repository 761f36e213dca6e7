from .base import Base
from .order import Order
from .food import Food
from .offer import Offer
from .admin import Admin
from .cart import Cart, CartItem
from .subscription import PushSubscription
