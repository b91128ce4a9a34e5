import os

from pydantic import BaseModel, Field, ValidationError

from embedrank.config.registry import DEFAULT_EMBEDDING_ALIAS
from embedrank.exceptions import InvalidConfigError


class ProjectConfig(BaseModel):
    """Per-project indexing settings persisted next to the index."""

    model: str = Field(default=DEFAULT_EMBEDDING_ALIAS)
    chunk_size: int = Field(default=512, gt=0)
    chunk_overlap: int = Field(default=128, ge=0)
    index_backend: str = Field(default="hnsw")

    @classmethod
    def load(cls, path: str) -> "ProjectConfig":
        if not os.path.exists(path):
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise InvalidConfigError(f"Project config {path} is invalid: {e}")

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))
