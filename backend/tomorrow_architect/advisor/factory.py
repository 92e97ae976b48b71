from functools import lru_cache

from tomorrow_architect.advisor.adapter import AdvisorAdapter
from tomorrow_architect.advisor.gemini_adapter import GeminiAdvisorAdapter
from tomorrow_architect.advisor.openai_adapter import OpenAIAdvisorAdapter
from tomorrow_architect.core.config import Settings, get_settings


def make_advisor_adapter(settings: Settings) -> AdvisorAdapter:
    if settings.ai_provider == "openai":
        return OpenAIAdvisorAdapter(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            timeout=settings.advisor_timeout_seconds,
        )
    return GeminiAdvisorAdapter(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        timeout=settings.advisor_timeout_seconds,
    )


@lru_cache
def get_advisor_adapter() -> AdvisorAdapter:
    return make_advisor_adapter(get_settings())
