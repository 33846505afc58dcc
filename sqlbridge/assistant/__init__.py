from .extractor import (
    ExtractedStatement,
    ExtractionResult,
    StatementKind,
    extract_statements,
    has_placeholder,
)
from .llm_adapter import LLM, LangChainLLMAdapter, create_llm
from .prompt_builder import build_prompt

__all__ = [
    "ExtractedStatement",
    "ExtractionResult",
    "StatementKind",
    "extract_statements",
    "has_placeholder",
    "LLM",
    "LangChainLLMAdapter",
    "create_llm",
    "build_prompt",
]
