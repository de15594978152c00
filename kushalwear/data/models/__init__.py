#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w Base.metadata

from kushalwear.data.models.user import UserModel
from kushalwear.data.models.product import ProductModel, ReviewModel
from kushalwear.data.models.cart import CartModel
from kushalwear.data.models.cart_item import CartItemModel
from kushalwear.data.models.wishlist import WishlistModel, WishlistItemModel
from kushalwear.data.models.order import OrderModel

__all__ = [
    "UserModel",
    "ProductModel",
    "ReviewModel",
    "CartModel",
    "CartItemModel",
    "WishlistModel",
    "WishlistItemModel",
    "OrderModel",
]
