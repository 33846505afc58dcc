"""
Adapters that bridge LangChain chat models to the lightweight LLM interface
used by the assistant service.
"""

from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from sqlbridge.config import Settings

SYSTEM_PROMPT = "You are a helpful database assistant."


class LLM:
    """
    Interface protocol implemented by LLM adapters.
    """

    def complete(self, prompt: str) -> str:  # pragma: no cover - protocol type
        raise NotImplementedError

    async def acomplete(self, prompt: str) -> str:  # pragma: no cover - protocol type
        raise NotImplementedError


def _coerce_to_text(result: Any) -> str:
    """
    Convert LangChain outputs into plain text.
    """

    if isinstance(result, BaseMessage):
        return str(result.content)
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        return str(result.get("output", result))
    return str(result)


class LangChainLLMAdapter(LLM):
    """
    Thin adapter around a LangChain chat model with a fixed system message.
    """

    def __init__(self, chat_model: BaseChatModel, system_prompt: str = SYSTEM_PROMPT):
        self._chat_model = chat_model
        self._system_prompt = system_prompt

    def _messages(self, prompt: str) -> list[BaseMessage]:
        return [SystemMessage(content=self._system_prompt), HumanMessage(content=prompt)]

    def complete(self, prompt: str) -> str:
        result = self._chat_model.invoke(self._messages(prompt))
        return _coerce_to_text(result).strip()

    async def acomplete(self, prompt: str) -> str:
        result = await self._chat_model.ainvoke(self._messages(prompt))
        return _coerce_to_text(result).strip()


def create_llm(settings: Settings) -> Optional[LLM]:
    """Build the OpenRouter-backed chat model, or None when no API key is configured."""
    if not settings.llm_enabled:
        return None
    chat_model = ChatOpenAI(
        model=settings.OPENROUTER_MODEL,
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        default_headers={
            "HTTP-Referer": settings.APP_URL,
            "X-Title": settings.APP_TITLE,
        },
    )
    return LangChainLLMAdapter(chat_model)


__all__ = ["LLM", "LangChainLLMAdapter", "SYSTEM_PROMPT", "create_llm"]
