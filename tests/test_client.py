"""
Tests for the VoyageClient facade.

Every test runs the real transport against FakeVoyageApi (tests/fake_api.py),
so call counts and request payloads reflect what would go over the wire.
"""

import asyncio
import base64

import pytest

from tests.fake_api import embeddings_body, rerank_body
from voyagekit.client import VoyageBuilder, VoyageClient
from voyagekit.config import ClientConfig, RetryPolicy
from voyagekit.errors import AuthError, NotFoundError, TransportError, ValidationError
from voyagekit.models import Document, InputType, SearchRequest, SearchType, as_documents
from voyagekit.types import Embedder, Reranker, Searcher

DOCS = [
    "Paris is the capital of France.",
    "Berlin is the capital of Germany.",
    "Bananas are rich in potassium.",
]


def run(awaitable_factory):
    """Run `awaitable_factory()` inside a fresh event loop."""

    async def main():
        return await awaitable_factory()

    return asyncio.run(main())


# ---------------------------------------------------------------------------
# Embeddings
# ---------------------------------------------------------------------------
def test_embed_batch_returns_vectors_in_input_order(client, fake_api):
    fake_api.queue("embeddings", embeddings_body([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]))

    response = run(lambda: client.embed_batch(["a", "b"]))

    assert response.embeddings == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
    assert fake_api.bodies("embeddings") == [{"input": ["a", "b"], "model": "voyage-3-large"}]


def test_embed_batch_reorders_out_of_order_data(client, fake_api):
    fake_api.queue(
        "embeddings",
        {
            "data": [
                {"embedding": [2.0], "index": 1},
                {"embedding": [1.0], "index": 0},
            ],
            "model": "voyage-3-large",
            "usage": {"total_tokens": 2},
        },
    )

    response = run(lambda: client.embed_batch(["first", "second"]))

    assert response.embeddings == [[1.0], [2.0]]


def test_embed_batch_of_nothing_makes_no_request(client, fake_api):
    response = run(lambda: client.embed_batch([]))

    assert response.embeddings == []
    assert fake_api.calls() == 0


def test_embed_batch_sends_input_type(client, fake_api):
    run(lambda: client.embed_batch(["a"], input_type=InputType.QUERY))

    assert fake_api.bodies("embeddings")[0]["input_type"] == "query"


def test_embed_batch_invalid_input_type_fails_without_request(client, fake_api):
    with pytest.raises(ValidationError):
        run(lambda: client.embed_batch(["a"], input_type="passage"))

    assert fake_api.calls() == 0


def test_vector_count_mismatch_is_a_transport_error(client, fake_api):
    fake_api.queue("embeddings", embeddings_body([[1.0]]))

    with pytest.raises(TransportError, match="Expected 2 embeddings"):
        run(lambda: client.embed_batch(["a", "b"]))


def test_embed_text_resolves_to_one_vector(client, fake_api):
    vector = run(lambda: client.embed_text("hello"))

    assert vector == [5.0, 0.0, 1.0]
    assert fake_api.bodies("embeddings") == [{"input": "hello", "model": "voyage-3-large"}]


def test_embed_with_prepared_request(client, fake_api):
    request = client.embeddings_request().texts("x", "yy").input_type("document").build()

    response = run(lambda: client.embed(request))

    assert len(response) == 2
    assert fake_api.bodies("embeddings")[0]["input_type"] == "document"


def test_embed_stream_yields_vectors_in_order(client, fake_api):
    async def main():
        return [vector async for vector in client.embed_stream(["a", "bb", "ccc"])]

    vectors = asyncio.run(main())

    assert [vector[0] for vector in vectors] == [1.0, 2.0, 3.0]
    assert fake_api.calls() == 1


def test_embed_stream_of_nothing_is_empty(client, fake_api):
    async def main():
        return await client.embed_stream([]).collect()

    assert asyncio.run(main()) == []
    assert fake_api.calls() == 0


def test_configured_embedding_model_is_used(fake_api):
    config = ClientConfig(api_key="k", embedding_model="voyage-code-3")
    client = VoyageClient(config, transport=fake_api.transport)

    run(lambda: client.embed_text("def f(): pass"))

    assert fake_api.bodies("embeddings")[0]["model"] == "voyage-code-3"


# ---------------------------------------------------------------------------
# Rerank
# ---------------------------------------------------------------------------
def test_rerank_response_is_sorted_by_relevance(client, fake_api):
    fake_api.queue(
        "rerank",
        {
            "data": [
                {"index": 0, "relevance_score": 0.2},
                {"index": 1, "relevance_score": 0.9},
            ]
        },
    )
    request = client.rerank_request().query("q").add_documents(["a", "b"]).build()

    response = run(lambda: client.rerank(request))

    assert [result.index for result in response.data] == [1, 0]


def test_find_similar_documents_streams_in_rank_order(client, fake_api):
    async def main():
        return await client.find_similar_documents("capital of France", DOCS).collect()

    results = asyncio.run(main())

    assert [item.rank for item in results] == [0, 1, 2]
    assert results[0].document.text == DOCS[0]
    similarities = [item.similarity for item in results]
    assert similarities == sorted(similarities, reverse=True)
    assert all(0.0 <= score <= 1.0 for score in similarities)


def test_find_similar_documents_respects_top_k(client, fake_api):
    async def main():
        return await client.find_similar_documents("capital of France", DOCS, top_k=2).collect()

    results = asyncio.run(main())

    assert len(results) == 2
    assert fake_api.bodies("rerank")[0]["top_k"] == 2


def test_exhausted_stream_needs_a_new_call(client, fake_api):
    async def main():
        stream = client.find_similar_documents("capital of France", DOCS)
        first = await stream.collect()
        again = await stream.collect()
        fresh = await client.find_similar_documents("capital of France", DOCS).collect()
        return first, again, fresh

    first, again, fresh = asyncio.run(main())

    assert len(first) == 3
    assert again == []
    assert fresh == first
    assert fake_api.calls("rerank") == 2


def test_find_similar_documents_without_documents_fails_without_request(client, fake_api):
    async def main():
        return await client.find_similar_documents("q", []).collect()

    with pytest.raises(ValidationError):
        asyncio.run(main())

    assert fake_api.calls() == 0


def test_most_similar_document_returns_rank_zero(client, fake_api):
    documents = [Document(text=DOCS[1], id="de"), Document(text=DOCS[0], id="fr")]

    best = run(lambda: client.most_similar_document("capital of France", documents))

    assert best.rank == 0
    assert best.document.id == "fr"


def test_most_similar_document_of_nothing_is_not_found(client, fake_api):
    with pytest.raises(NotFoundError):
        run(lambda: client.most_similar_document("anything", []))

    assert fake_api.calls() == 0


def test_most_similar_document_with_empty_results_is_not_found(client, fake_api):
    fake_api.queue("rerank", {"data": []})

    with pytest.raises(NotFoundError, match="No matching documents"):
        run(lambda: client.most_similar_document("q", ["a"]))


def test_rerank_result_with_unknown_index_is_a_transport_error(client, fake_api):
    fake_api.queue("rerank", rerank_body({5: 0.9}))

    with pytest.raises(TransportError, match="unknown document 5"):
        run(lambda: client.most_similar_document("q", ["a"]))


def test_most_similar_calls_run_concurrently(client, fake_api):
    async def main():
        return await asyncio.gather(
            client.most_similar_document("capital of France", DOCS),
            client.most_similar_document("capital of Germany", DOCS),
        )

    france, germany = asyncio.run(main())

    assert france.document.text == DOCS[0]
    assert germany.document.text == DOCS[1]
    assert fake_api.calls("rerank") == 2


# ---------------------------------------------------------------------------
# Errors through the facade
# ---------------------------------------------------------------------------
def test_rejected_key_surfaces_auth_error_after_one_attempt(client, fake_api):
    fake_api.queue("rerank", 401)

    with pytest.raises(AuthError):
        run(lambda: client.most_similar_document("q", ["a"]))

    assert fake_api.calls() == 1


def test_server_errors_exhaust_retries(fake_api, sleeps):
    config = ClientConfig(api_key="k", retry=RetryPolicy(max_retries=2))
    client = VoyageClient(config, transport=fake_api.transport, sleep=sleeps)
    fake_api.queue("embeddings", 503, 503, 503)

    with pytest.raises(TransportError):
        run(lambda: client.embed_batch(["a"]))

    assert fake_api.calls() == 3


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def _vectors_by_input_type(body):
    if body.get("input_type") == "query":
        return embeddings_body([[1.0, 0.0]])
    return embeddings_body([[0.0, 1.0], [1.0, 0.1], [0.7, 0.7]])


def test_similarity_search_embeds_query_and_documents(client, fake_api):
    fake_api.respond_with("embeddings", _vectors_by_input_type)
    request = SearchRequest(query="q", documents=as_documents(["x", "y", "z"]))

    results = run(lambda: client.search(request))

    assert [result.index for result in results] == [1, 2, 0]
    assert results[0].document.text == "y"
    assert sorted(body["input_type"] for body in fake_api.bodies("embeddings")) == [
        "document",
        "query",
    ]


def test_similarity_search_uses_precomputed_embeddings(client, fake_api):
    fake_api.respond_with("embeddings", _vectors_by_input_type)
    request = SearchRequest(
        query="q",
        documents=as_documents(["x", "y"]),
        embeddings=[[0.0, 1.0], [1.0, 0.0]],
        top_k=1,
    )

    results = run(lambda: client.search(request))

    assert [result.index for result in results] == [1]
    assert fake_api.calls("embeddings") == 1


def test_rerank_search_uses_rerank_scores(client, fake_api):
    request = SearchRequest(
        query="capital of France",
        documents=as_documents(DOCS),
        search_type=SearchType.RERANK,
    )

    results = run(lambda: client.search(request))

    assert results[0].index == 0
    assert fake_api.calls("rerank") == 1
    assert fake_api.calls("embeddings") == 0


def test_search_without_documents_returns_nothing(client, fake_api):
    request = SearchRequest(query="q", documents=[])

    assert run(lambda: client.search(request)) == []
    assert fake_api.calls() == 0


# ---------------------------------------------------------------------------
# VoyageBuilder
# ---------------------------------------------------------------------------
def test_builder_requires_api_key():
    with pytest.raises(ValidationError, match="API key is required"):
        VoyageBuilder().build()


def test_builder_applies_settings(fake_api):
    client = (
        VoyageBuilder()
        .with_api_key("built-key")
        .with_base_url("https://proxy.test/v1/")
        .with_timeout(5)
        .with_transport(fake_api.transport)
        .build()
    )

    run(lambda: client.embed_text("hi"))

    assert client.config.timeout == 5
    assert str(fake_api.requests[0].url) == "https://proxy.test/v1/embeddings"
    assert fake_api.requests[0].headers["Authorization"] == "Bearer built-key"


def test_with_key_and_invalid_config():
    assert VoyageClient.with_key("abc").config.base_url == "https://api.voyageai.com/v1"

    with pytest.raises(AuthError):
        VoyageClient.with_key("")


def test_client_satisfies_interfaces(client):
    assert isinstance(client, Embedder)
    assert isinstance(client, Reranker)
    assert isinstance(client, Searcher)


def test_truncated_base64_embedding_is_a_transport_error(client, fake_api):
    fake_api.queue(
        "embeddings",
        {"data": [{"embedding": base64.b64encode(b"\x00\x00\x80?\x01").decode(), "index": 0}]},
    )

    with pytest.raises(TransportError, match="Unexpected EmbeddingsResponse"):
        run(lambda: client.embed_batch(["a"]))
