import logging
from functools import lru_cache

from google import genai
from openai import OpenAI

logger = logging.getLogger(__name__)


@lru_cache
def get_gemini_client(api_key: str) -> genai.Client:
    logger.info("Initializing Gemini client")
    return genai.Client(api_key=api_key)


@lru_cache
def get_groq_client(api_key: str, base_url: str) -> OpenAI:
    logger.info("Initializing Groq client at %s", base_url)
    return OpenAI(api_key=api_key, base_url=base_url)
