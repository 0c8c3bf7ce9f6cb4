"""
Public data model for the voyagekit SDK.

Callers can rely on:

    from voyagekit.models import EmbeddingsRequest, RerankRequest, Document

without needing to know which module each model lives in. Field names of
the request and response models mirror the Voyage REST API exactly.
"""

from .embeddings import (
    EmbeddingData,
    EmbeddingModel,
    EmbeddingsRequest,
    EmbeddingsResponse,
    EncodingFormat,
    InputType,
    Usage,
)
from .rerank import (
    Document,
    DocumentSimilarity,
    RerankModel,
    RerankRequest,
    RerankResponse,
    RerankResult,
    RerankUsage,
    as_documents,
)
from .search import SearchRequest, SearchResult, SearchType

__all__ = [
    # Embeddings
    "EmbeddingData",
    "EmbeddingModel",
    "EmbeddingsRequest",
    "EmbeddingsResponse",
    "EncodingFormat",
    "InputType",
    "Usage",
    # Rerank
    "Document",
    "DocumentSimilarity",
    "RerankModel",
    "RerankRequest",
    "RerankResponse",
    "RerankResult",
    "RerankUsage",
    "as_documents",
    # Search
    "SearchRequest",
    "SearchResult",
    "SearchType",
]
