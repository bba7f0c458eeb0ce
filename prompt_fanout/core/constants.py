"""Shared constants for prompt-fanout.

Generation parameters are fixed: callers only choose the prompt.
"""

# =============================================================================
# Service Defaults
# =============================================================================

DEFAULT_SERVICE_NAME = "prompt-fanout"
DEFAULT_PORT = 8888
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_ENVIRONMENT = "development"


# =============================================================================
# Hugging Face Inference
# =============================================================================

DEFAULT_HF_BASE_URL = "https://router.huggingface.co"
HF_INFERENCE_PATH = "/v1/inference/{model_name}"
HF_API_KEY_ENV = "HF_API_KEY"

MAX_NEW_TOKENS = 256
TEMPERATURE = 0.7


# =============================================================================
# Response Messages
# =============================================================================

PROVIDER_NOT_IMPLEMENTED = "Provider not implemented"
ERROR_METHOD_NOT_ALLOWED = "Method not allowed"
ERROR_MISSING_PROMPT = "Missing prompt"


# =============================================================================
# HTTP Headers
# =============================================================================

CONTENT_TYPE_JSON = "application/json"

CORS_ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

JSON_CORS_HEADERS = {
    "Content-Type": CONTENT_TYPE_JSON,
    **CORS_ALLOW_ORIGIN,
}
