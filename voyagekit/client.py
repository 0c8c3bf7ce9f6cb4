"""
VoyageClient: the high‑level facade of the SDK.

The client combines the request builders, the HTTP transport and the async
result types into a small set of operations:

    client = VoyageClient.from_env()

    response = await client.embed_batch(["a", "b"])
    best = await client.most_similar_document("capital of France", docs)

    async for match in client.find_similar_documents("capital of France", docs):
        print(match.rank, match.similarity, match.document.text)

None of the public methods is itself `async`. Each returns a concrete
awaitable (AsyncResult subclass) or async iterator (ResultStream subclass),
so callers never depend on raw coroutines, tasks or queues.

Errors raised while preparing a call (validation, empty input) are
delivered through the returned wrapper, the same way as network errors, and
no request is sent.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar, Union

import httpx
import pydantic

from voyagekit.builders import EmbeddingsRequestBuilder, RerankRequestBuilder
from voyagekit.config import ClientConfig, RetryPolicy
from voyagekit.errors import NotFoundError, TransportError, ValidationError
from voyagekit.logging_utils import setup_logger
from voyagekit.models import (
    DocumentSimilarity,
    EmbeddingsRequest,
    EmbeddingsResponse,
    InputType,
    RerankRequest,
    RerankResponse,
    SearchRequest,
    SearchResult,
    SearchType,
    as_documents,
)
from voyagekit.similarity import rank_by_similarity
from voyagekit.tasks import (
    DEFAULT_STREAM_CAPACITY,
    AsyncDocumentSimilarity,
    AsyncEmbedding,
    AsyncEmbeddingsResponse,
    AsyncRerankResponse,
    AsyncSearchResults,
    DocumentSimilarityStream,
    EmbeddingStream,
)
from voyagekit.transport import HttpTransport, SleepFn
from voyagekit.types import DocumentLike

logger = setup_logger("voyagekit.client")

R = TypeVar("R", bound=pydantic.BaseModel)


def _parse(model_cls: Type[R], body: Dict[str, Any]) -> R:
    try:
        return model_cls.model_validate(body)
    except pydantic.ValidationError as exc:
        raise TransportError(f"Unexpected {model_cls.__name__} shape: {exc}") from exc


class VoyageClient:
    """
    Client for the Voyage embeddings and rerank API.

    Parameters
    ----------
    config : ClientConfig
        Immutable configuration (API key, base URL, timeout, retries).
    transport : httpx.AsyncBaseTransport | None
        Optional httpx transport, mainly for tests (httpx.MockTransport).
    sleep : callable
        Coroutine used for retry delays.
    stream_capacity : int
        Buffer size of the result streams.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFn = asyncio.sleep,
        stream_capacity: int = DEFAULT_STREAM_CAPACITY,
    ) -> None:
        self.config = config
        self._http = HttpTransport(config, transport=transport, sleep=sleep)
        self._stream_capacity = stream_capacity

    @classmethod
    def from_env(cls, api_key: Optional[str] = None, **kwargs: Any) -> "VoyageClient":
        """Build a client from VOYAGE_* environment variables (and .env)."""
        return cls(ClientConfig.from_env(api_key=api_key), **kwargs)

    @classmethod
    def with_key(cls, api_key: str, **kwargs: Any) -> "VoyageClient":
        return cls(ClientConfig(api_key=api_key), **kwargs)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------
    def embeddings_request(self) -> EmbeddingsRequestBuilder:
        """A builder preset with this client's default embedding model."""
        return EmbeddingsRequestBuilder(default_model=self.config.embedding_model)

    def rerank_request(self) -> RerankRequestBuilder:
        """A builder preset with this client's default rerank model."""
        return RerankRequestBuilder(default_model=self.config.rerank_model)

    # ------------------------------------------------------------------
    # Raw calls (one HTTP request each)
    # ------------------------------------------------------------------
    async def _create_embeddings(self, request: EmbeddingsRequest) -> EmbeddingsResponse:
        logger.debug("Embedding %d input(s) with %s", request.input_count, request.model)
        body = await self._http.post("embeddings", request.to_payload())
        response = _parse(EmbeddingsResponse, body)

        if len(response.data) != request.input_count:
            raise TransportError(
                f"Expected {request.input_count} embeddings, received {len(response.data)}"
            )
        return response

    async def _create_rerank(self, request: RerankRequest) -> RerankResponse:
        logger.debug("Reranking %d document(s) with %s", len(request.documents), request.model)
        body = await self._http.post("rerank", request.to_payload())
        response = _parse(RerankResponse, body)

        for result in response.data:
            if not 0 <= result.index < len(request.documents):
                raise TransportError(f"Rerank result references unknown document {result.index}")
        if not response.data:
            logger.warning("Rerank response contains no results")
        return response

    def _rerank_request_for(
        self, query: str, documents: Iterable[DocumentLike], top_k: Optional[int] = None
    ) -> RerankRequest:
        builder = self.rerank_request().query(query).add_documents(documents)
        if top_k is not None:
            builder.top_k(top_k)
        return builder.build()

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------
    def embed(self, request: EmbeddingsRequest) -> AsyncEmbeddingsResponse:
        """Send a prepared EmbeddingsRequest."""
        return AsyncEmbeddingsResponse(lambda: self._create_embeddings(request))

    def embed_batch(
        self, texts: Sequence[str], input_type: Optional[Union[InputType, str]] = None
    ) -> AsyncEmbeddingsResponse:
        """
        Embed several texts in one request.

        An empty sequence resolves to an empty EmbeddingsResponse without
        contacting the API.
        """
        texts = list(texts)
        if not texts:
            return AsyncEmbeddingsResponse.from_value(
                EmbeddingsResponse(model=self.config.embedding_model)
            )
        try:
            builder = self.embeddings_request().input(texts)
            if input_type is not None:
                builder.input_type(input_type)
            request = builder.build()
        except ValidationError as exc:
            return AsyncEmbeddingsResponse.from_error(exc)
        return self.embed(request)

    def embed_text(self, text: str) -> AsyncEmbedding:
        """Embed one text and resolve to its vector."""
        try:
            request = self.embeddings_request().input(text).build()
        except ValidationError as exc:
            return AsyncEmbedding.from_error(exc)

        async def _call() -> List[float]:
            response = await self._create_embeddings(request)
            return response.embeddings[0]

        return AsyncEmbedding(_call)

    def embed_stream(self, texts: Sequence[str]) -> EmbeddingStream:
        """Embed several texts in one request and yield the vectors in order."""
        texts = list(texts)
        if not texts:
            return EmbeddingStream(_no_items, capacity=self._stream_capacity)
        try:
            request = self.embeddings_request().input(texts).build()
        except ValidationError as exc:
            return EmbeddingStream.from_error(exc)

        async def _call() -> List[List[float]]:
            response = await self._create_embeddings(request)
            return response.embeddings

        return EmbeddingStream(_call, capacity=self._stream_capacity)

    # ------------------------------------------------------------------
    # Rerank
    # ------------------------------------------------------------------
    def rerank(self, request: RerankRequest) -> AsyncRerankResponse:
        """Send a prepared RerankRequest."""
        return AsyncRerankResponse(lambda: self._create_rerank(request))

    def find_similar_documents(
        self,
        query: str,
        documents: Iterable[DocumentLike],
        top_k: Optional[int] = None,
    ) -> DocumentSimilarityStream:
        """
        Rank `documents` against `query` and stream the results.

        The whole rerank response is received before the first item is
        yielded, so items always arrive with rank 0, 1, 2, ... and
        non‑increasing similarity.
        """
        try:
            request = self._rerank_request_for(query, documents, top_k)
        except ValidationError as exc:
            return DocumentSimilarityStream.from_error(exc)

        async def _call() -> List[DocumentSimilarity]:
            response = await self._create_rerank(request)
            return response.similarities(request.documents)

        return DocumentSimilarityStream(_call, capacity=self._stream_capacity)

    def most_similar_document(
        self, query: str, documents: Iterable[DocumentLike]
    ) -> AsyncDocumentSimilarity:
        """
        Resolve to the rank‑0 document for `query`.

        Fails with NotFoundError, without any request, when `documents` is
        empty, and with NotFoundError when the API ranks nothing.
        """
        documents = as_documents(documents)
        if not documents:
            return AsyncDocumentSimilarity.from_error(NotFoundError("No documents to rank"))
        try:
            request = self._rerank_request_for(query, documents)
        except ValidationError as exc:
            return AsyncDocumentSimilarity.from_error(exc)

        async def _call() -> DocumentSimilarity:
            response = await self._create_rerank(request)
            similarities = response.similarities(request.documents)
            if not similarities:
                raise NotFoundError("No matching documents found")
            return similarities[0]

        return AsyncDocumentSimilarity(_call)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def search(self, request: SearchRequest) -> AsyncSearchResults:
        """Semantic search over the request's documents."""
        return AsyncSearchResults(lambda: self._search(request))

    async def _search(self, request: SearchRequest) -> List[SearchResult]:
        if not request.documents:
            return []

        if request.search_type == SearchType.RERANK:
            rerank = self._rerank_request_for(request.query, request.documents, request.top_k)
            response = await self._create_rerank(rerank)
            return [
                SearchResult(
                    index=result.index,
                    score=result.relevance_score,
                    document=request.documents[result.index],
                )
                for result in response.data
            ]

        query_request = (
            self.embeddings_request().input(request.query).input_type(InputType.QUERY).build()
        )
        if request.embeddings is not None:
            query_response = await self._create_embeddings(query_request)
            document_vectors = request.embeddings
        else:
            documents_request = (
                self.embeddings_request()
                .input([doc.text for doc in request.documents])
                .input_type(InputType.DOCUMENT)
                .build()
            )
            query_response, documents_response = await asyncio.gather(
                self._create_embeddings(query_request),
                self._create_embeddings(documents_request),
            )
            document_vectors = documents_response.embeddings

        ranked = rank_by_similarity(query_response.embeddings[0], document_vectors)
        if request.top_k is not None:
            ranked = ranked[: request.top_k]
        return [
            SearchResult(index=index, score=score, document=request.documents[index])
            for index, score in ranked
        ]


async def _no_items() -> List[Any]:
    return []


# ---------------------------------------------------------------------------
# Client builder
# ---------------------------------------------------------------------------
class VoyageBuilder:
    """
    Fluent construction of a VoyageClient.

        client = VoyageBuilder().with_api_key(key).with_timeout(10).build()
    """

    def __init__(self) -> None:
        self._api_key: Optional[str] = None
        self._overrides: Dict[str, Any] = {}
        self._client_kwargs: Dict[str, Any] = {}

    def with_api_key(self, api_key: str) -> "VoyageBuilder":
        self._api_key = api_key
        return self

    def with_base_url(self, base_url: str) -> "VoyageBuilder":
        self._overrides["base_url"] = base_url
        return self

    def with_timeout(self, timeout: float) -> "VoyageBuilder":
        self._overrides["timeout"] = timeout
        return self

    def with_retry_policy(self, retry: RetryPolicy) -> "VoyageBuilder":
        self._overrides["retry"] = retry
        return self

    def with_config(self, config: ClientConfig) -> "VoyageBuilder":
        """Start from an existing config; later with_* calls still apply."""
        self._api_key = config.api_key
        self._overrides = {
            "base_url": config.base_url,
            "timeout": config.timeout,
            "retry": config.retry,
            "embedding_model": config.embedding_model,
            "rerank_model": config.rerank_model,
            **self._overrides,
        }
        return self

    def with_transport(self, transport: httpx.AsyncBaseTransport) -> "VoyageBuilder":
        self._client_kwargs["transport"] = transport
        return self

    def build(self) -> VoyageClient:
        if not self._api_key:
            raise ValidationError("API key is required")
        config = ClientConfig(api_key=self._api_key, **self._overrides)
        return VoyageClient(config, **self._client_kwargs)
