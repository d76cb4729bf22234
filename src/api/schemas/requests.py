"""
Pydantic schemas: Request bodies.

Required-ness is checked by the use cases so that every missing field is
reported in the same envelope.
"""

from pydantic import BaseModel


class SubmitDocumentsRequest(BaseModel):
    document_type: str | None = None
    document_front_file_id: str | None = None
    document_back_file_id: str | None = None
    notes: str | None = None


class UpdateStatusRequest(BaseModel):
    user_id: str | None = None
    status: str | None = None
    notes: str | None = None
    rejection_reason: str | None = None
