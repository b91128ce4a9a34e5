from pydantic import BaseModel, ConfigDict, Field


class ModelConfig(BaseModel):
    """Embedding model entry as stored in the registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Canonical model identifier, e.g. BAAI/bge-small-en-v1.5")
    provider: str = Field(description="Backend family tag, e.g. fastembed or mixedbread")
    dimensions: int = Field(gt=0, description="Length of every output vector")
    max_tokens: int = Field(gt=0, description="Sequence length cap applied when batching")
    description: str = Field(default="")


class RerankModelConfig(BaseModel):
    """Cross-encoder reranking model entry as stored in the registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Canonical model identifier")
    provider: str = Field(description="Backend family tag")
    description: str = Field(default="")
