"""Pydantic models for the /embeddings endpoint."""

import base64
import struct
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmbeddingModel(str, Enum):
    """Embedding models offered by the Voyage API."""

    VOYAGE_3_LARGE = "voyage-3-large"
    VOYAGE_3 = "voyage-3"
    VOYAGE_3_LITE = "voyage-3-lite"
    VOYAGE_CODE_3 = "voyage-code-3"

    @property
    def embedding_dimension(self) -> int:
        """Default output dimension of the model."""
        return _DIMENSIONS[self]


_DIMENSIONS = {
    EmbeddingModel.VOYAGE_3_LARGE: 1024,
    EmbeddingModel.VOYAGE_3: 1024,
    EmbeddingModel.VOYAGE_3_LITE: 512,
    EmbeddingModel.VOYAGE_CODE_3: 1024,
}


class InputType(str, Enum):
    """Tells the API whether the inputs are search queries or documents."""

    QUERY = "query"
    DOCUMENT = "document"


class EncodingFormat(str, Enum):
    FLOAT = "float"
    BASE64 = "base64"


class EmbeddingsRequest(BaseModel):
    """Immutable request body for POST /embeddings."""

    model_config = ConfigDict(frozen=True)

    input: Union[str, List[str]]
    model: str
    input_type: Optional[InputType] = None
    truncation: Optional[bool] = None
    encoding_format: Optional[EncodingFormat] = None

    @field_validator("input")
    @classmethod
    def _input_not_empty(cls, value: Union[str, List[str]]) -> Union[str, List[str]]:
        if isinstance(value, str):
            if not value:
                raise ValueError("input text must not be empty")
        elif not value:
            raise ValueError("input must contain at least one text")
        return value

    @field_validator("model")
    @classmethod
    def _model_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("model must be provided")
        return value

    @property
    def texts(self) -> List[str]:
        """The inputs as a list, regardless of how they were supplied."""
        if isinstance(self.input, str):
            return [self.input]
        return list(self.input)

    @property
    def input_count(self) -> int:
        return len(self.texts)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body sent to the API; unset optional fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class EmbeddingData(BaseModel):
    object: str = "embedding"
    embedding: List[float]
    index: int

    @field_validator("embedding", mode="before")
    @classmethod
    def _decode_base64(cls, value: Any) -> Any:
        # encoding_format="base64" returns packed little-endian float32.
        if isinstance(value, str):
            raw = base64.b64decode(value)
            if len(raw) % 4:
                raise ValueError(f"base64 embedding has {len(raw)} bytes, not a multiple of 4")
            return list(struct.unpack(f"<{len(raw) // 4}f", raw))
        return value


class Usage(BaseModel):
    total_tokens: int = 0


class EmbeddingsResponse(BaseModel):
    """
    Parsed response of POST /embeddings.

    `data` is always ordered by `index`, so `embeddings[i]` belongs to the
    i‑th input of the request.
    """

    object: str = "list"
    data: List[EmbeddingData] = Field(default_factory=list)
    model: str = ""
    usage: Usage = Field(default_factory=Usage)

    @field_validator("data")
    @classmethod
    def _order_by_index(cls, value: List[EmbeddingData]) -> List[EmbeddingData]:
        return sorted(value, key=lambda item: item.index)

    @property
    def embeddings(self) -> List[List[float]]:
        return [item.embedding for item in self.data]

    def __len__(self) -> int:
        return len(self.data)
