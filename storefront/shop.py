# storefront/shop.py
from fastapi import APIRouter, Depends, Path
from typing import List

from .errors import NotFound
from .schemas import MAX_ID, ProductOut
from .stores import Stores, get_stores

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
async def list_products(stores: Stores = Depends(get_stores)):
    return await stores.catalog.list_all()


# declared before /{product_id} so "featured" is not parsed as an id
@router.get("/featured", response_model=List[ProductOut])
async def list_featured_products(stores: Stores = Depends(get_stores)):
    return await stores.catalog.list_featured()


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int = Path(le=MAX_ID), stores: Stores = Depends(get_stores)):
    product = await stores.catalog.find_by_id(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product
