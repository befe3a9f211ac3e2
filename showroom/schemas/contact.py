"""Contact inquiry schemas."""

from showroom.schemas.common import CamelModel


class ContactInquiry(CamelModel):
    """Public contact form submission.

    Fields are validated in ``ContactService`` so that every problem is
    reported at once, keyed by field name.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""
