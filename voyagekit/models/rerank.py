"""Pydantic models for the /rerank endpoint and its derived similarity values."""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RerankModel(str, Enum):
    """Reranking models offered by the Voyage API."""

    RERANK_2 = "rerank-2"
    RERANK_2_LITE = "rerank-2-lite"


class Document(BaseModel):
    """A candidate document: opaque text plus an optional caller identifier."""

    model_config = ConfigDict(frozen=True)

    text: str
    id: Optional[str] = None


def as_documents(items: Iterable[Union[str, Document]]) -> List[Document]:
    """Normalize a mix of plain strings and Documents into Documents."""
    return [item if isinstance(item, Document) else Document(text=item) for item in items]


class RerankRequest(BaseModel):
    """Immutable request body for POST /rerank."""

    model_config = ConfigDict(frozen=True)

    query: str
    documents: List[Document]
    model: str
    top_k: Optional[int] = Field(default=None, ge=1)
    truncation: Optional[bool] = None

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must be provided")
        return value

    @field_validator("documents")
    @classmethod
    def _documents_not_empty(cls, value: List[Document]) -> List[Document]:
        if not value:
            raise ValueError("at least one document is required")
        return value

    @field_validator("model")
    @classmethod
    def _model_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("model must be provided")
        return value

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "query": self.query,
            "documents": [doc.text for doc in self.documents],
            "model": self.model,
        }
        if self.top_k is not None:
            payload["top_k"] = self.top_k
        if self.truncation is not None:
            payload["truncation"] = self.truncation
        return payload


class RerankResult(BaseModel):
    index: int
    relevance_score: float
    document: Optional[str] = None


class RerankUsage(BaseModel):
    total_tokens: int = 0


class DocumentSimilarity(BaseModel):
    """
    One ranked document.

    rank 0 is the most similar; similarity is clamped to [0.0, 1.0]. The
    document is the caller's own Document, carried through by index.
    """

    model_config = ConfigDict(frozen=True)

    rank: int
    similarity: float
    document: Document


class RerankResponse(BaseModel):
    """Parsed response of POST /rerank, sorted by descending relevance."""

    object: str = "list"
    data: List[RerankResult] = Field(default_factory=list)
    model: str = ""
    usage: RerankUsage = Field(default_factory=RerankUsage)

    @field_validator("data")
    @classmethod
    def _order_by_relevance(cls, value: List[RerankResult]) -> List[RerankResult]:
        return sorted(value, key=lambda item: item.relevance_score, reverse=True)

    def similarities(self, documents: List[Document]) -> List[DocumentSimilarity]:
        """
        Join the ranked results back to the request's documents.

        Raises IndexError if the API references a document index the request
        did not contain.
        """
        return [
            DocumentSimilarity(
                rank=rank,
                similarity=min(1.0, max(0.0, result.relevance_score)),
                document=documents[result.index],
            )
            for rank, result in enumerate(self.data)
        ]

    def __len__(self) -> int:
        return len(self.data)
