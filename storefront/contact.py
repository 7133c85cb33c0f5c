# storefront/contact.py
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends

from .auth import get_optional_user
from .errors import InvalidInput
from .models import User
from .ratelimit import rate_limit
from .schemas import ContactRequest, SuccessResponse
from .stores import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@router.post("", response_model=SuccessResponse, dependencies=[Depends(rate_limit("contact"))])
async def submit_contact(
    payload: ContactRequest,
    stores: Stores = Depends(get_stores),
    current_user: Optional[User] = Depends(get_optional_user),
):
    name = payload.name.strip()
    email = payload.email.strip()
    message = payload.message.strip()
    if not name or not email or not message:
        raise InvalidInput("Name, email and message are required")
    if not EMAIL_RE.match(email):
        raise InvalidInput("Invalid email address")

    inquiry = await stores.contacts.add(
        user_id=current_user.id if current_user is not None else None,
        name=name,
        email=email,
        subject=(payload.subject or "").strip(),
        message=message,
    )
    logger.info("Contact inquiry %s stored", inquiry.id)
    return SuccessResponse(message="Thank you for contacting us! We will get back to you soon.")
