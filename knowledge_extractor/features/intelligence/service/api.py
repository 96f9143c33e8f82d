import logging

from knowledge_extractor.core.config.settings import Settings
from ..data.openai_adapter import OpenAIResponsesAdapter
from ..data.resilient_adapter import ResilientLLMAdapter
from ..data.stub_adapter import StubLLMAdapter
from ..domain.interfaces import ILLMAdapter

logger = logging.getLogger(__name__)


def build_llm_adapter(settings: Settings) -> ILLMAdapter:
    """
    Selects the provider once at startup:
    - Stub when forced or when no API credential is configured.
    - Otherwise the remote provider, wrapped with automatic stub fallback.
    """
    if settings.USE_MOCK_LLM:
        logger.info("Using Stub LLM adapter")
        return StubLLMAdapter()

    remote = OpenAIResponsesAdapter(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        api_url=settings.OPENAI_API_URL,
        timeout=settings.LLM_TIMEOUT_SEC
    )
    logger.info(f"Using OpenAI adapter ({settings.OPENAI_MODEL}) with automatic stub fallback")
    return ResilientLLMAdapter(primary=remote, fallback=StubLLMAdapter())
