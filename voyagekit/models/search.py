"""Models for client‑side semantic search."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .rerank import Document


class SearchType(str, Enum):
    """
    How documents are scored against the query.

    SIMILARITY embeds both sides and ranks by cosine similarity; RERANK asks
    the rerank endpoint for relevance scores.
    """

    SIMILARITY = "similarity"
    RERANK = "rerank"


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    documents: List[Document]
    embeddings: Optional[List[List[float]]] = None
    top_k: Optional[int] = Field(default=None, ge=1)
    search_type: SearchType = SearchType.SIMILARITY

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must be provided")
        return value

    @model_validator(mode="after")
    def _embeddings_match_documents(self) -> "SearchRequest":
        if self.embeddings is not None and len(self.embeddings) != len(self.documents):
            raise ValueError(
                f"got {len(self.embeddings)} embeddings for {len(self.documents)} documents"
            )
        return self


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    score: float
    document: Document
