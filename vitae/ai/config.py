import os
from dataclasses import dataclass

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

_DEFAULT_MODELS = {
    "groq": ("llama-3.3-70b-versatile", "meta-llama/llama-4-scout-17b-16e-instruct"),
    "openai": ("gpt-4o-mini", "gpt-4o-mini"),
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    analysis_model: str
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "groq").strip().lower()
    generation_default, analysis_default = _DEFAULT_MODELS.get(provider, _DEFAULT_MODELS["openai"])
    model = (os.getenv("AI_MODEL") or generation_default).strip()
    analysis_model = (os.getenv("AI_ANALYSIS_MODEL") or analysis_default).strip()

    if provider == "groq":
        api_key = (os.getenv("GROQ_API_KEY") or "").strip()
        base_url = (os.getenv("GROQ_BASE_URL") or GROQ_BASE_URL).strip()
    else:
        api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
        base_url = (os.getenv("OPENAI_BASE_URL") or "").strip() or None

    return AIConfig(
        provider=provider,
        model=model,
        analysis_model=analysis_model,
        api_key=api_key,
        base_url=base_url,
        timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "60")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )
