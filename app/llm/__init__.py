"""
LLM 패키지
"""

from .runner import (
    BaseLLMRunner,
    GroqRunner,
    LlamaCppRunner,
    create_llm_runner,
    get_llm_runner,
)
from .prompts import (
    build_user_prompt,
    NOTE_ANALYSIS_SYSTEM_PROMPT,
    FILTER_EXTRACTION_SYSTEM_PROMPT,
)

__all__ = [
    "BaseLLMRunner",
    "GroqRunner",
    "LlamaCppRunner",
    "create_llm_runner",
    "get_llm_runner",
    "build_user_prompt",
    "NOTE_ANALYSIS_SYSTEM_PROMPT",
    "FILTER_EXTRACTION_SYSTEM_PROMPT",
]
