from vitae.ai.config import load_ai_config
from vitae.ai.providers.openai_provider import OpenAIProvider
from vitae.ai.tailoring import LLMResumeAI
from vitae.ports import ResumeAI


def get_resume_ai() -> ResumeAI:
    cfg = load_ai_config()

    if cfg.provider in {"groq", "openai"}:
        client = OpenAIProvider(
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
        )
        return LLMResumeAI(client, model=cfg.model, analysis_model=cfg.analysis_model)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
