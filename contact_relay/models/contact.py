from pydantic import BaseModel, ConfigDict, Field
from typing import List


class ContactSubmission(BaseModel):
    """Fields posted by the SYNOTEC website contact form"""
    nombre: str
    email: str
    mensaje: str


class EmailAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    name: str = None


class Personalization(BaseModel):
    model_config = ConfigDict(frozen=True)

    to: List[EmailAddress]
    subject: str


class EmailContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "text/plain"
    value: str


class EmailSendRequest(BaseModel):
    """
    Body of a SendGrid v3 mail/send call.

    `from` is a Python keyword, so the sender lives in `from_` and is
    serialized under its alias.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    personalizations: List[Personalization]
    from_: EmailAddress = Field(alias="from")
    content: List[EmailContent]
    reply_to: EmailAddress

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HandlerResult(BaseModel):
    success: bool
    message: str
    http_status: int = 200

    def body(self) -> dict:
        return {"success": self.success, "message": self.message}
