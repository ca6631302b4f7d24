"""Response models for tool output."""

from typing import Any, Dict, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class RAGSource(BaseModel):
    """A retrieved chunk as shown to the caller."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "1a2b3c4d-chunk",
                "fileName": "Refund Policy",
                "snippet": "Refunds are issued within 14 days...",
                "score": 0.87,
            }
        },
    )

    id: str = Field(..., description="Chunk ID from metadata, or chunk-<index>")
    file_name: str = Field(..., alias="fileName", description="Readable source document name")
    snippet: str = Field(..., description="The chunk text")
    score: float = Field(0, description="Relevance score reported by the knowledge base")


class RetrievalOutcome(BaseModel):
    """Result of one knowledge base retrieval."""

    context: str = Field("", description="All chunk texts joined by blank lines")
    is_rag_working: bool = Field(..., description="False when the retrieval call failed")
    rag_sources: List[RAGSource] = Field(default_factory=list)


class TextContent(BaseModel):
    """Plain-text content item."""

    type: Literal["text"] = "text"
    text: str


class JsonContent(BaseModel):
    """Structured content item."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["json"] = "json"
    data: Dict[str, Any] = Field(..., alias="json")


ContentItem = Union[TextContent, JsonContent]


class ToolResponse(BaseModel):
    """Standardized response for a tool call."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[ContentItem] = Field(default_factory=list)
    is_error: bool = Field(False, alias="isError")

    @classmethod
    def text(cls, message: str, is_error: bool = False) -> "ToolResponse":
        """Single text item response."""
        return cls(content=[TextContent(text=message)], is_error=is_error)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with camelCase keys."""
        return self.model_dump(by_alias=True)


class ToolDefinition(BaseModel):
    """A tool advertised in the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")
