"""Cascading vision classification: every Gemini model, then every Groq model."""

import base64
import binascii
import logging
import time
from typing import Optional, Sequence

from google.genai import types

from dish_audit.config import AuditSettings
from dish_audit.llm_clients import get_gemini_client, get_groq_client
from dish_audit.models import ClassificationResult
from dish_audit.prompts import ANALYSIS_PROMPT
from dish_audit.utils import extract_json, strip_data_uri

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "All AI providers are currently unavailable. Gemini quota exceeded and "
    "Groq failed. Please wait a few minutes and try again."
)


class ClassifierBackend:
    """
    One vision provider with an ordered list of models.

    Subclasses implement `_complete`, which sends the prompt and the image to
    a single model and returns the raw JSON text. Any exception it raises
    means "this model failed, try the next one".
    """

    name = "backend"
    rate_limit_markers: Sequence[str] = ("429",)

    def __init__(self, api_key: Optional[str], models: Sequence[str]):
        self.api_key = api_key
        self.models = list(models)

    def available(self) -> bool:
        return bool(self.api_key) and not self.api_key.startswith("TODO")

    def is_rate_limited(self, error_text: str) -> bool:
        return any(marker in error_text for marker in self.rate_limit_markers)

    def accepts(self, image_b64: str) -> bool:
        """Whether this provider can take the photo as given."""
        return True

    def classify(self, model: str, image_b64: str) -> ClassificationResult:
        text = self._complete(model, image_b64)
        return ClassificationResult.model_validate(extract_json(text))

    def _complete(self, model: str, image_b64: str) -> str:
        raise NotImplementedError


class GeminiBackend(ClassifierBackend):
    name = "Gemini"
    rate_limit_markers = ("429", "quota", "Too Many Requests", "RESOURCE_EXHAUSTED")

    def accepts(self, image_b64: str) -> bool:
        # Gemini takes raw bytes; Groq gets the string inside a data URL
        try:
            base64.b64decode(image_b64)
        except (binascii.Error, ValueError):
            return False
        return True

    def _complete(self, model: str, image_b64: str) -> str:
        client = get_gemini_client(self.api_key)
        response = client.models.generate_content(
            model=model,
            contents=[
                ANALYSIS_PROMPT,
                types.Part.from_bytes(
                    data=base64.b64decode(image_b64),
                    mime_type="image/jpeg",
                ),
            ],
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return response.text or ""


class GroqBackend(ClassifierBackend):
    name = "Groq"
    rate_limit_markers = ("429", "rate_limit")

    def __init__(self, api_key: Optional[str], models: Sequence[str], base_url: str):
        super().__init__(api_key, models)
        self.base_url = base_url

    def _complete(self, model: str, image_b64: str) -> str:
        client = get_groq_client(self.api_key, self.base_url)
        completion = client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"},
                        },
                    ],
                }
            ],
            temperature=0.3,
            max_completion_tokens=1024,
            response_format={"type": "json_object"},
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


class VisionClassifier:
    """Tries each backend's models in order and returns the first parsed answer."""

    def __init__(self, backends: Sequence[ClassifierBackend]):
        self.backends = list(backends)

    @classmethod
    def from_settings(cls, settings: AuditSettings) -> "VisionClassifier":
        return cls([
            GeminiBackend(settings.gemini_api_key, settings.gemini_models),
            GroqBackend(settings.groq_api_key, settings.groq_models, settings.groq_base_url),
        ])

    def classify(self, image_data: str) -> ClassificationResult:
        image_b64 = strip_data_uri(image_data)

        for index, backend in enumerate(self.backends):
            if index > 0:
                logger.info(
                    "[Fallback] %s failed, trying %s...",
                    self.backends[index - 1].name,
                    backend.name,
                )
            result = self._run_backend(backend, image_b64)
            if result is not None:
                return result

        logger.error("[FATAL] All AI providers failed.")
        return ClassificationResult(is_food=False, error=UNAVAILABLE_MESSAGE)

    def _run_backend(
        self, backend: ClassifierBackend, image_b64: str
    ) -> Optional[ClassificationResult]:
        if not backend.available():
            logger.warning("%s API key not set, skipping %s.", backend.name, backend.name)
            return None
        if not backend.accepts(image_b64):
            logger.warning("%s cannot decode the photo as base64, skipping %s.", backend.name, backend.name)
            return None

        for model in backend.models:
            start = time.time()
            logger.info("[%s] Trying model: %s", backend.name, model)
            try:
                result = backend.classify(model, image_b64)
            except Exception as e:
                error_text = str(e)
                if backend.is_rate_limited(error_text):
                    logger.warning("[%s:%s] Quota exceeded, trying next...", backend.name, model)
                else:
                    logger.error("[%s:%s] Error: %s", backend.name, model, error_text)
                continue

            logger.info(
                "[%s:%s] Response received in %sms",
                backend.name,
                model,
                round((time.time() - start) * 1000, 2),
            )
            return result

        logger.warning("[%s] All models exhausted.", backend.name)
        return None
