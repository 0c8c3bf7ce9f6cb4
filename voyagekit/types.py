"""
voyagekit/types.py

Structural interfaces for the SDK.

These Protocols describe the surface that CLI code and downstream
applications depend on. Any object with compatible methods satisfies them,
including VoyageClient and the in‑memory fakes used in tests. Every method
returns one of the concrete wrapper types from voyagekit.tasks, never a raw
coroutine or asyncio primitive.
"""

from typing import Iterable, List, Protocol, Sequence, Union, runtime_checkable

from voyagekit.models import Document, EmbeddingsRequest, RerankRequest, SearchRequest
from voyagekit.tasks import (
    AsyncDocumentSimilarity,
    AsyncEmbedding,
    AsyncEmbeddingsResponse,
    AsyncRerankResponse,
    AsyncSearchResults,
    DocumentSimilarityStream,
    EmbeddingStream,
)

# A document may be passed as plain text or as a Document with an id.
DocumentLike = Union[str, Document]


# ---------------------------------------------------------------------------
# Embedder
# ---------------------------------------------------------------------------
# Anything that turns text into vectors.
#
#   embed(request)        → full response for a prepared request
#   embed_text(text)      → one vector
#   embed_batch(texts)    → full response, one vector per text, in order
#   embed_stream(texts)   → vectors one at a time, in order
# ---------------------------------------------------------------------------
@runtime_checkable
class Embedder(Protocol):
    def embed(self, request: EmbeddingsRequest) -> AsyncEmbeddingsResponse: ...

    def embed_text(self, text: str) -> AsyncEmbedding: ...

    def embed_batch(self, texts: Sequence[str]) -> AsyncEmbeddingsResponse: ...

    def embed_stream(self, texts: Sequence[str]) -> EmbeddingStream: ...


# ---------------------------------------------------------------------------
# Reranker
# ---------------------------------------------------------------------------
# Anything that orders documents by relevance to a query.
#
# find_similar_documents yields DocumentSimilarity values in rank order;
# most_similar_document resolves to the rank‑0 item only.
# ---------------------------------------------------------------------------
@runtime_checkable
class Reranker(Protocol):
    def rerank(self, request: RerankRequest) -> AsyncRerankResponse: ...

    def find_similar_documents(
        self, query: str, documents: Iterable[DocumentLike]
    ) -> DocumentSimilarityStream: ...

    def most_similar_document(
        self, query: str, documents: Iterable[DocumentLike]
    ) -> AsyncDocumentSimilarity: ...


@runtime_checkable
class Searcher(Protocol):
    def search(self, request: SearchRequest) -> AsyncSearchResults: ...


__all__: List[str] = ["DocumentLike", "Embedder", "Reranker", "Searcher"]
