"""Public contact form endpoint."""

from fastapi import APIRouter

from showroom.api.deps import Mailer
from showroom.schemas.common import SuccessResponse
from showroom.schemas.contact import ContactInquiry
from showroom.services.contact_service import ContactService

router = APIRouter()


@router.post("/contact", response_model=SuccessResponse)
async def submit_inquiry(body: ContactInquiry, mailer: Mailer) -> SuccessResponse:
    """Send a customer confirmation and notify the sales inbox."""
    await ContactService(mailer).submit(body)
    return SuccessResponse()
