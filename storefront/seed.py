# storefront/seed.py
import logging

from .stores import Catalog

logger = logging.getLogger(__name__)

# Prices are in minor currency units
DEMO_PRODUCTS = [
    {"name": "Cartoon Tropical T-Shirt Blue", "description": "Comfortable cotton t-shirt with tropical print", "price": 88900, "stock_qty": 50, "image_url": "img/about/products/f1.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Pink", "description": "Stylish pink t-shirt with cartoon design", "price": 88900, "stock_qty": 45, "image_url": "img/about/products/f2.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Green", "description": "Fresh green tropical design t-shirt", "price": 88900, "stock_qty": 60, "image_url": "img/about/products/f3.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Orange", "description": "Vibrant orange tropical t-shirt", "price": 88900, "stock_qty": 40, "image_url": "img/about/products/f4.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Red", "description": "Bold red cartoon t-shirt", "price": 88900, "stock_qty": 55, "image_url": "img/about/products/f5.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Yellow", "description": "Bright yellow tropical design", "price": 88900, "stock_qty": 50, "image_url": "img/about/products/f6.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Purple", "description": "Purple tropical print t-shirt", "price": 88900, "stock_qty": 35, "image_url": "img/about/products/f7.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "Cartoon Tropical T-Shirt Navy", "description": "Classic navy tropical t-shirt", "price": 88900, "stock_qty": 48, "image_url": "img/about/products/f8.jpg", "category": "T-Shirts", "is_featured": True},
    {"name": "New Arrival Shirt White", "description": "Modern white casual shirt", "price": 88900, "stock_qty": 30, "image_url": "img/about/products/n1.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Black", "description": "Elegant black casual shirt", "price": 88900, "stock_qty": 25, "image_url": "img/about/products/n2.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Grey", "description": "Comfortable grey shirt", "price": 88900, "stock_qty": 40, "image_url": "img/about/products/n3.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Beige", "description": "Stylish beige casual shirt", "price": 88900, "stock_qty": 35, "image_url": "img/about/products/n4.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Blue", "description": "Classic blue casual shirt", "price": 88900, "stock_qty": 45, "image_url": "img/about/products/n5.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Brown", "description": "Warm brown casual shirt", "price": 88900, "stock_qty": 30, "image_url": "img/about/products/n6.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Olive", "description": "Trendy olive casual shirt", "price": 88900, "stock_qty": 28, "image_url": "img/about/products/n7.jpg", "category": "Shirts", "is_featured": False},
    {"name": "New Arrival Shirt Maroon", "description": "Rich maroon casual shirt", "price": 88900, "stock_qty": 32, "image_url": "img/about/products/n8.jpg", "category": "Shirts", "is_featured": False},
]


async def seed_products(catalog: Catalog) -> int:
    """Fill an empty catalog with the demo products. Returns how many were added."""
    if await catalog.count() > 0:
        return 0
    for fields in DEMO_PRODUCTS:
        await catalog.add(**fields)
    logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)
