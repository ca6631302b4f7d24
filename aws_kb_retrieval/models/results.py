"""Models for raw Bedrock knowledge base retrieval results."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

CHUNK_ID_METADATA_KEY = "x-amz-bedrock-kb-chunk-id"

# Location types in the order they are checked, with the key holding the URI
_LOCATION_URI_KEYS = (
    ("s3Location", "uri"),
    ("webLocation", "url"),
    ("confluenceLocation", "url"),
    ("sharePointLocation", "url"),
    ("salesforceLocation", "url"),
    ("kendraDocumentLocation", "uri"),
    ("customDocumentLocation", "id"),
)


class RawResult(BaseModel):
    """One chunk returned by the Bedrock Retrieve API."""

    text: Optional[str] = Field(None, description="Chunk text content")
    uri: Optional[str] = Field(None, description="Source document location")
    score: Optional[float] = Field(None, description="Relevance score")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def chunk_id(self) -> Optional[str]:
        value = self.metadata.get(CHUNK_ID_METADATA_KEY)
        return str(value) if value else None

    @classmethod
    def from_bedrock(cls, item: Dict[str, Any]) -> "RawResult":
        """
        Build a RawResult from one entry of ``retrievalResults``.

        Args:
            item: Retrieval result dict as returned by boto3

        Returns:
            Parsed RawResult; missing fields stay None
        """
        item = item or {}
        content = item.get("content") or {}
        return cls(
            text=content.get("text"),
            uri=_location_uri(item.get("location") or {}),
            score=item.get("score"),
            metadata=item.get("metadata") or {},
        )


def _location_uri(location: Dict[str, Any]) -> Optional[str]:
    for location_key, uri_key in _LOCATION_URI_KEYS:
        uri = (location.get(location_key) or {}).get(uri_key)
        if uri:
            return uri
    return None
