"""Project-wide constants shared by the inference pipeline.

Imports nothing from the package.
"""

# Graph input names recognised when wiring tensors into an ONNX session
INPUT_IDS_NAME: str = "input_ids"
ATTENTION_MASK_NAME: str = "attention_mask"
TOKEN_TYPE_IDS_NAME: str = "token_type_ids"

# Integer dtype expected by transformer ONNX exports for all token inputs
TOKEN_DTYPE: str = "int64"

# Fallback sequence cap for rerank models, whose configs carry no max_tokens
DEFAULT_RERANK_MAX_LENGTH: int = 512

# Hugging Face revision used when fetching model assets
DEFAULT_HUB_REVISION: str = "main"
