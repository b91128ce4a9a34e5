from typing import Optional

from pydantic import BaseModel, Field

from embedrank.utils.constants import DEFAULT_HUB_REVISION, DEFAULT_RERANK_MAX_LENGTH


class AppConfig(BaseModel):
    name: str = Field(default="EmbedRank")
    description: str = Field(default="ONNX text embedding and reranking")
    version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5001)


class InferenceConfig(BaseModel):
    # None means one intra-op thread per available CPU
    intra_op_threads: Optional[int] = Field(default=None, ge=1)
    session_provider: str = Field(default="CPUExecutionProvider")


class CacheConfig(BaseModel):
    model_cache_dir: Optional[str] = None
    revision: str = Field(default=DEFAULT_HUB_REVISION)
    max_loaded_models: int = Field(default=3, ge=1)


class RerankerConfig(BaseModel):
    max_length: int = Field(default=DEFAULT_RERANK_MAX_LENGTH, ge=1)


class RegistryConfig(BaseModel):
    models_file: Optional[str] = None
    rerank_models_file: Optional[str] = None


class LoggingConfig(BaseModel):
    folder: Optional[str] = None
    app_log_file: str = Field(default="embedrank.log")
    level: str = Field(default="INFO")


class AppSettings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    reranker: RerankerConfig = Field(default_factory=RerankerConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
