"""
Entity: Document Reference

Pointer to a previously uploaded file, reusable across contexts by tagging.
Pure model: no framework or database dependency.
"""

from dataclasses import dataclass


DOCUMENT_ACTIVE = "active"
IDENTITY_CONTEXT = "identity_verification"


@dataclass
class DocumentReference:
    """Uploaded-file metadata owned by the document store."""
    id: str
    status: str = DOCUMENT_ACTIVE
    owner_id: str | None = None          # uploader, when the store knows it
    context: str | None = None           # ex: "identity_verification"
    entity_id: str | None = None
    url: str | None = None
    original_name: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == DOCUMENT_ACTIVE

    def usable_by(self, user_id: str) -> bool:
        """Active and not uploaded by somebody else."""
        if not self.is_active:
            return False
        return self.owner_id is None or self.owner_id == user_id
