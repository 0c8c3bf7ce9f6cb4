"""
Fluent request builders.

Builders accumulate fields through chained calls and produce an immutable
request on `build()`:

    request = (
        EmbeddingsRequestBuilder()
        .texts("first", "second")
        .input_type(InputType.DOCUMENT)
        .build()
    )

Building never touches the network. Missing or invalid fields raise
voyagekit.errors.ValidationError, which is the only error type a builder
ever raises; pydantic's own validation errors are translated.
"""

from enum import Enum
from typing import Any, Iterable, List, Optional, Type, TypeVar, Union

import pydantic

from voyagekit.errors import ValidationError
from voyagekit.models import (
    Document,
    EmbeddingModel,
    EmbeddingsRequest,
    EncodingFormat,
    InputType,
    RerankModel,
    RerankRequest,
    as_documents,
)

M = TypeVar("M", bound=pydantic.BaseModel)
E = TypeVar("E", bound=Enum)


def _enum_value(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else value


def _coerce(enum_cls: Type[E], value: Union[Enum, str]) -> E:
    try:
        return enum_cls(_enum_value(value))
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {enum_cls.__name__} {value!r}; expected one of: {allowed}"
        ) from exc


def _validated(model_cls: Type[M], **fields: Any) -> M:
    """Construct a request model, translating pydantic errors into ValidationError."""
    try:
        return model_cls(**fields)
    except pydantic.ValidationError as exc:
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"])
            message = err["msg"].removeprefix("Value error, ")
            problems.append(f"{location}: {message}" if location else message)
        raise ValidationError(f"Invalid {model_cls.__name__}: " + "; ".join(problems)) from exc


# ---------------------------------------------------------------------------
# Embeddings
# ---------------------------------------------------------------------------
class EmbeddingsRequestBuilder:
    """Builder for EmbeddingsRequest. Required: at least one input text."""

    def __init__(self, default_model: Union[EmbeddingModel, str] = EmbeddingModel.VOYAGE_3_LARGE) -> None:
        self._input: Optional[Union[str, List[str]]] = None
        self._model: str = _enum_value(default_model)
        self._input_type: Optional[InputType] = None
        self._truncation: Optional[bool] = None
        self._encoding_format: Optional[EncodingFormat] = None

    def input(self, value: Union[str, Iterable[str]]) -> "EmbeddingsRequestBuilder":
        """Set the input as a single string or a sequence of strings."""
        self._input = value if isinstance(value, str) else list(value)
        return self

    def texts(self, *texts: str) -> "EmbeddingsRequestBuilder":
        """Append texts to a list input."""
        current = self._input
        if current is None:
            current = []
        elif isinstance(current, str):
            current = [current]
        self._input = list(current) + list(texts)
        return self

    def model(self, model: Union[EmbeddingModel, str]) -> "EmbeddingsRequestBuilder":
        self._model = _enum_value(model)
        return self

    def input_type(self, input_type: Union[InputType, str]) -> "EmbeddingsRequestBuilder":
        self._input_type = _coerce(InputType, input_type)
        return self

    def truncation(self, enabled: bool = True) -> "EmbeddingsRequestBuilder":
        self._truncation = enabled
        return self

    def encoding_format(self, encoding: Union[EncodingFormat, str]) -> "EmbeddingsRequestBuilder":
        self._encoding_format = _coerce(EncodingFormat, encoding)
        return self

    def build(self) -> EmbeddingsRequest:
        if self._input is None:
            raise ValidationError("Invalid EmbeddingsRequest: input is required")
        return _validated(
            EmbeddingsRequest,
            input=self._input,
            model=self._model,
            input_type=self._input_type,
            truncation=self._truncation,
            encoding_format=self._encoding_format,
        )


# ---------------------------------------------------------------------------
# Rerank
# ---------------------------------------------------------------------------
class RerankRequestBuilder:
    """Builder for RerankRequest. Required: a query and at least one document."""

    def __init__(self, default_model: Union[RerankModel, str] = RerankModel.RERANK_2) -> None:
        self._query: Optional[str] = None
        self._documents: List[Document] = []
        self._model: str = _enum_value(default_model)
        self._top_k: Optional[int] = None
        self._truncation: Optional[bool] = None

    def query(self, query: str) -> "RerankRequestBuilder":
        self._query = query
        return self

    def add_document(self, document: Union[str, Document]) -> "RerankRequestBuilder":
        self._documents.extend(as_documents([document]))
        return self

    def add_documents(self, documents: Iterable[Union[str, Document]]) -> "RerankRequestBuilder":
        self._documents.extend(as_documents(documents))
        return self

    def model(self, model: Union[RerankModel, str]) -> "RerankRequestBuilder":
        self._model = _enum_value(model)
        return self

    def top_k(self, top_k: int) -> "RerankRequestBuilder":
        self._top_k = top_k
        return self

    def truncation(self, enabled: bool = True) -> "RerankRequestBuilder":
        self._truncation = enabled
        return self

    def build(self) -> RerankRequest:
        if self._query is None:
            raise ValidationError("Invalid RerankRequest: query is required")
        if not self._documents:
            raise ValidationError("Invalid RerankRequest: at least one document is required")
        return _validated(
            RerankRequest,
            query=self._query,
            documents=list(self._documents),
            model=self._model,
            top_k=self._top_k,
            truncation=self._truncation,
        )
