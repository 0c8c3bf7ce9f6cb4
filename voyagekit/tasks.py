"""
Concrete async result types returned by the client facade.

Every network‑bound client method is a plain (non‑async) method that
returns one of the types below instead of a bare coroutine, Task or Queue:

    • AsyncResult[T]  — exactly one value or one error. Await it.
    • ResultStream[T] — zero or more items, then completion or an error.
                        Iterate it with `async for`.

How they work
-------------
AsyncResult runs the call on a background asyncio.Task and hands the
outcome over through a one‑shot asyncio.Future. ResultStream runs the call
once, then a producer task pushes the items, already in final order, into a
bounded asyncio.Queue; the producer suspends while the queue is full.

Both start their task immediately when created inside a running event loop,
and otherwise on the first await / iteration. Dropping a wrapper does not
abort the HTTP call already in flight; its outcome is simply discarded.
A ResultStream is single‑pass: once exhausted it stays exhausted, and a new
call must be issued to iterate again.
"""

import asyncio
from typing import (
    Any,
    Awaitable,
    Callable,
    Generator,
    Generic,
    Iterable,
    List,
    Optional,
    TypeVar,
)

from voyagekit.models import (
    DocumentSimilarity,
    EmbeddingsResponse,
    RerankResponse,
    SearchResult,
)

T = TypeVar("T")

DEFAULT_STREAM_CAPACITY = 16


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


# ---------------------------------------------------------------------------
# Single‑value form
# ---------------------------------------------------------------------------
class AsyncResult(Generic[T]):
    """
    An awaitable handle on one in‑flight call.

    Awaiting it more than once returns the same value (or raises the same
    error); the call itself runs only once.
    """

    def __init__(self, call: Callable[[], Awaitable[T]]) -> None:
        self._call = call
        self._task: Optional["asyncio.Task[None]"] = None
        self._outcome: Optional["asyncio.Future[T]"] = None
        if _loop_running():
            self._start()

    @classmethod
    def from_error(cls, error: BaseException) -> "AsyncResult[T]":
        """A result that fails with `error` without doing any I/O."""

        async def _fail() -> T:
            raise error

        return cls(_fail)

    @classmethod
    def from_value(cls, value: T) -> "AsyncResult[T]":
        async def _succeed() -> T:
            return value

        return cls(_succeed)

    def _start(self) -> None:
        loop = asyncio.get_running_loop()
        outcome: "asyncio.Future[T]" = loop.create_future()
        self._outcome = outcome
        self._task = loop.create_task(self._run(outcome))

    async def _run(self, outcome: "asyncio.Future[T]") -> None:
        # The outcome may already be cancelled if the awaiting side went away;
        # in that case the result is dropped.
        try:
            value = await self._call()
        except asyncio.CancelledError:
            if not outcome.done():
                outcome.cancel()
            raise
        except Exception as exc:
            if not outcome.done():
                outcome.set_exception(exc)
                # A dropped wrapper must not log "exception was never retrieved".
                outcome.exception()
        else:
            if not outcome.done():
                outcome.set_result(value)

    def __await__(self) -> Generator[Any, None, T]:
        if self._outcome is None:
            self._start()
        assert self._outcome is not None
        return self._outcome.__await__()

    def done(self) -> bool:
        return self._outcome is not None and self._outcome.done()

    def cancel(self) -> bool:
        """Best‑effort cancellation of the background call."""
        if self._task is None or self._task.done():
            return False
        cancelled = self._task.cancel()
        # A task cancelled before it starts never reaches _run's handler.
        if self._outcome is not None and not self._outcome.done():
            self._outcome.cancel()
        return cancelled


class AsyncEmbeddingsResponse(AsyncResult[EmbeddingsResponse]):
    """Resolves to an EmbeddingsResponse."""


class AsyncEmbedding(AsyncResult[List[float]]):
    """Resolves to a single embedding vector."""


class AsyncRerankResponse(AsyncResult[RerankResponse]):
    """Resolves to a RerankResponse."""


class AsyncDocumentSimilarity(AsyncResult[DocumentSimilarity]):
    """Resolves to the single most similar document."""


class AsyncSearchResults(AsyncResult[List[SearchResult]]):
    """Resolves to search results ordered by descending score."""


# ---------------------------------------------------------------------------
# Multi‑value form
# ---------------------------------------------------------------------------
_END = object()


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error


class ResultStream(Generic[T]):
    """
    A forward‑only, single‑pass async iterator over the items of one call.

    Parameters
    ----------
    call : callable
        Coroutine function returning all items, already ordered.
    capacity : int
        Size of the bounded buffer between producer and consumer.
    """

    def __init__(
        self,
        call: Callable[[], Awaitable[Iterable[T]]],
        capacity: int = DEFAULT_STREAM_CAPACITY,
    ) -> None:
        self._call = call
        self._capacity = capacity
        self._queue: Optional["asyncio.Queue[Any]"] = None
        self._task: Optional["asyncio.Task[None]"] = None
        self._exhausted = False
        if _loop_running():
            self._start()

    @classmethod
    def from_error(cls, error: BaseException) -> "ResultStream[T]":
        async def _fail() -> Iterable[T]:
            raise error

        return cls(_fail)

    def _start(self) -> None:
        self._queue = asyncio.Queue(maxsize=self._capacity)
        self._task = asyncio.get_running_loop().create_task(self._produce(self._queue))

    async def _produce(self, queue: "asyncio.Queue[Any]") -> None:
        try:
            items = await self._call()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await queue.put(_Failure(exc))
            return
        for item in items:
            await queue.put(item)
        await queue.put(_END)

    def __aiter__(self) -> "ResultStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._exhausted:
            raise StopAsyncIteration
        if self._queue is None:
            self._start()
        assert self._queue is not None

        item = await self._queue.get()
        if item is _END:
            self._exhausted = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._exhausted = True
            raise item.error
        return item

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def collect(self) -> List[T]:
        """Drain the remaining items into a list."""
        return [item async for item in self]

    async def aclose(self) -> None:
        """Stop consuming; the producer task is cancelled."""
        self._exhausted = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass


class DocumentSimilarityStream(ResultStream[DocumentSimilarity]):
    """Documents in descending similarity order (rank 0 first)."""


class EmbeddingStream(ResultStream[List[float]]):
    """Embedding vectors in input order."""
