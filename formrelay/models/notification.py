from pydantic import BaseModel
from typing import List


class Attachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class NotificationMessage(BaseModel):
    """An outbound email built from a submission, ready for the transport"""
    recipient: str
    subject: str
    body_html: str
    attachments: List[Attachment] = []
