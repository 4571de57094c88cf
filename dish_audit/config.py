import os
from dataclasses import dataclass
from typing import Optional


def _parse_cors_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def _parse_optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))

# -----------------------------------
# Vision providers
# -----------------------------------

# GEMINI_API_KEY: primary provider. Unset or "TODO..." placeholder disables it.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

# GROQ_API_KEY: fallback provider, reached through its OpenAI-compatible API.
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")

# Each Gemini model has a separate quota, so order matters.
GEMINI_MODELS = [
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash-001",
]

# Llama-4 models accept image input on Groq.
GROQ_VISION_MODELS = [
    "meta-llama/llama-4-scout-17b-16e-instruct",
    "meta-llama/llama-4-maverick-17b-128e-instruct",
]

# -----------------------------------
# Nutrition databases (RecipeDB / FlavorDB behind the data proxy)
# -----------------------------------

# Local proxy by default; "/api-proxy" is appended to build the endpoint.
DEFAULT_NUTRITION_PROXY_URL = "http://127.0.0.1:8000"
NUTRITION_PROXY_URL = os.getenv("NUTRITION_PROXY_URL", DEFAULT_NUTRITION_PROXY_URL)
NUTRITION_DB_TOKEN = os.getenv("NUTRITION_DB_TOKEN", "")

# HTTP_TIMEOUT_S: timeout for database lookups and photo downloads (unset = wait forever)
HTTP_TIMEOUT_S = _parse_optional_float(os.getenv("HTTP_TIMEOUT_S"))

# -----------------------------------
# Photo preprocessing
# -----------------------------------

# USE_BACKEND_RESIZE: shrink photos before sending them to the vision models
USE_BACKEND_RESIZE = os.getenv("USE_BACKEND_RESIZE", "true").lower() == "true"

# BACKEND_MAX_SIDE_PX: longer side of the photo after resize
BACKEND_MAX_SIDE_PX = int(os.getenv("BACKEND_MAX_SIDE_PX", "1024"))


@dataclass(frozen=True)
class AuditSettings:
    """Configuration handed to DishAuditHandler at construction."""

    gemini_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    gemini_models: tuple[str, ...] = tuple(GEMINI_MODELS)
    groq_models: tuple[str, ...] = tuple(GROQ_VISION_MODELS)
    proxy_base_url: str = DEFAULT_NUTRITION_PROXY_URL
    db_token: str = ""
    http_timeout_s: Optional[float] = None
    use_backend_resize: bool = True
    max_side_px: int = 1024

    @property
    def proxy_endpoint(self) -> str:
        return f"{self.proxy_base_url.rstrip('/')}/api-proxy"

    @classmethod
    def from_env(cls) -> "AuditSettings":
        return cls(
            gemini_api_key=GEMINI_API_KEY,
            groq_api_key=GROQ_API_KEY,
            groq_base_url=GROQ_BASE_URL,
            proxy_base_url=NUTRITION_PROXY_URL,
            db_token=NUTRITION_DB_TOKEN,
            http_timeout_s=HTTP_TIMEOUT_S,
            use_backend_resize=USE_BACKEND_RESIZE,
            max_side_px=BACKEND_MAX_SIDE_PX,
        )
