"""
Public API for the voyagekit SDK.

This package provides a stable import surface. Callers can rely on:

    from voyagekit import VoyageClient, EmbeddingsRequestBuilder, Document

without needing to know anything about the internal module layout.
"""

__version__ = "1.0.0"

from .builders import EmbeddingsRequestBuilder, RerankRequestBuilder
from .client import VoyageBuilder, VoyageClient
from .config import ClientConfig, RetryPolicy
from .errors import (
    AuthError,
    NotFoundError,
    RateLimitError,
    TransportError,
    ValidationError,
    VoyageError,
)
from .models import (
    Document,
    DocumentSimilarity,
    EmbeddingModel,
    EmbeddingsRequest,
    EmbeddingsResponse,
    EncodingFormat,
    InputType,
    RerankModel,
    RerankRequest,
    RerankResponse,
    SearchRequest,
    SearchResult,
    SearchType,
    as_documents,
)
from .similarity import cosine_similarity
from .tasks import (
    AsyncDocumentSimilarity,
    AsyncEmbedding,
    AsyncEmbeddingsResponse,
    AsyncRerankResponse,
    AsyncResult,
    AsyncSearchResults,
    DocumentSimilarityStream,
    EmbeddingStream,
    ResultStream,
)
from .types import DocumentLike, Embedder, Reranker, Searcher

# Define the public API surface for `from voyagekit import *`
__all__ = [
    "__version__",
    # Client
    "VoyageClient",
    "VoyageBuilder",
    "ClientConfig",
    "RetryPolicy",
    # Builders
    "EmbeddingsRequestBuilder",
    "RerankRequestBuilder",
    # Models
    "Document",
    "DocumentSimilarity",
    "EmbeddingModel",
    "EmbeddingsRequest",
    "EmbeddingsResponse",
    "EncodingFormat",
    "InputType",
    "RerankModel",
    "RerankRequest",
    "RerankResponse",
    "SearchRequest",
    "SearchResult",
    "SearchType",
    "as_documents",
    # Async results
    "AsyncResult",
    "AsyncEmbeddingsResponse",
    "AsyncEmbedding",
    "AsyncRerankResponse",
    "AsyncDocumentSimilarity",
    "AsyncSearchResults",
    "ResultStream",
    "DocumentSimilarityStream",
    "EmbeddingStream",
    # Errors
    "VoyageError",
    "ValidationError",
    "AuthError",
    "RateLimitError",
    "TransportError",
    "NotFoundError",
    # Interfaces
    "DocumentLike",
    "Embedder",
    "Reranker",
    "Searcher",
    # Utilities
    "cosine_similarity",
]
