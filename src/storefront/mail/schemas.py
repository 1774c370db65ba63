#####################################
# --- Email message descriptors --- #
#####################################

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class EmailPropertyType(str, Enum):
    """Keys of the well-known entries in a message props mapping."""
    USER = "user"
    INFO = "info"


class EmailTarget(BaseModel):
    """Recipient of a message."""
    email_address: str = Field(
        description="Primary recipient address.",
        json_schema_extra={"example": "shopper@example.com"},
    )
    cc_addresses: List[str] = Field(default_factory=list)
    bcc_addresses: List[str] = Field(default_factory=list)


class Attachment(BaseModel):
    """File attached to a message."""
    filename: str
    data: bytes
    mime_type: str = Field(
        default="application/octet-stream",
        description="The MIME type of the attachment, e.g. \"application/pdf\".",
    )


class EmailInfo(BaseModel):
    """Everything about a message except who receives it."""
    subject: str
    from_address: str
    encoding: str = "utf-8"
    message_body: Optional[str] = Field(
        default=None,
        description="Pre-rendered HTML body; rendered from email_template when omitted.",
    )
    email_template: Optional[str] = Field(
        default=None,
        description="Template used to render the body, with $name placeholders.",
    )
    attachments: List[Attachment] = Field(default_factory=list)
