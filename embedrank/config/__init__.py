from embedrank.config.model_config import ModelConfig, RerankModelConfig
from embedrank.config.project_config import ProjectConfig
from embedrank.config.registry import ModelRegistry, RerankModelRegistry

__all__ = [
    "ModelConfig",
    "RerankModelConfig",
    "ModelRegistry",
    "RerankModelRegistry",
    "ProjectConfig",
]
