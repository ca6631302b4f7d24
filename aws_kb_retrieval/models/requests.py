"""Request models for tool argument validation."""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RESULT_COUNT = 3


class RetrievalRequest(BaseModel):
    """Arguments of the retrieve_from_aws_kb tool."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "query": "What is the refund policy?",
                "knowledgeBaseId": "ABCDEFGHIJ",
                "n": 3,
            }
        },
    )

    query: str = Field(..., description="The query to perform retrieval on")
    knowledge_base_id: Optional[str] = Field(
        None, alias="knowledgeBaseId", description="The ID of the AWS Knowledge Base"
    )
    n: Union[int, float] = Field(DEFAULT_RESULT_COUNT, description="Number of results to retrieve")

    @field_validator("n", mode="before")
    @classmethod
    def _default_when_null(cls, value):
        return DEFAULT_RESULT_COUNT if value is None else value
