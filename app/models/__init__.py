# Models
from .product import Product
from .product_images import ProductImage

__all__ = [
    "Product",
    "ProductImage",
]
