# storefront/cart.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from .auth import get_current_user, get_optional_user, get_settings
from .cart_service import CartService
from .config import Settings
from .models import User
from .schemas import (
    MAX_ID, CartAddRequest, CartAddResponse, CartCountResponse, CartItemOut,
    CartUpdateRequest, CartUpdateResponse, ErrorResponse, SuccessResponse,
)
from .stores import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/cart",
    tags=["cart"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


def get_cart_service(request: Request, stores: Stores = Depends(get_stores)) -> CartService:
    # the lock registry outlives the request; the stores do not
    return CartService(stores.catalog, stores.carts, request.app.state.cart_locks)


@router.get("", response_model=List[CartItemOut])
async def get_cart(
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await service.list_cart(current_user.id)


@router.get("/count", response_model=CartCountResponse)
async def get_cart_count(
    request: Request,
    service: CartService = Depends(get_cart_service),
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
):
    # the header badge must not break the page, so identity is resolved
    # inside the guard too
    user_id = None
    try:
        current_user = await get_optional_user(request, stores, settings)
        user_id = current_user.id if current_user is not None else None
        count = await service.cart_count(user_id)
    except SQLAlchemyError:
        logger.exception("Cart count failed", extra={"user_id": user_id})
        count = 0
    return CartCountResponse(count=count)


@router.post("", response_model=CartAddResponse)
async def add_to_cart(
    payload: CartAddRequest,
    response: Response,
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    result = await service.add_to_cart(current_user.id, payload.product_id, payload.quantity)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
        message = "Added to cart"
    else:
        message = "Cart updated"
    return CartAddResponse(created=result.created, quantity=result.quantity, message=message)


@router.patch("/{item_id}", response_model=CartUpdateResponse)
async def update_cart_item(
    payload: CartUpdateRequest,
    item_id: int = Path(le=MAX_ID),
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    result = await service.update_quantity(current_user.id, item_id, payload.quantity)
    return CartUpdateResponse(id=result.id, quantity=result.quantity)


@router.delete("/{item_id}", response_model=SuccessResponse)
async def remove_cart_item(
    item_id: int = Path(le=MAX_ID),
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    await service.remove_entry(current_user.id, item_id)
    return SuccessResponse()
