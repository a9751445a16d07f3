import asyncio
import logging
from typing import Awaitable, Callable, List

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from app.core.genai_client import get_chat_model

logger = logging.getLogger(__name__)

TextGenerator = Callable[[List[BaseMessage]], Awaitable[str]]
QueryGenerator = Callable[[str], Awaitable[str]]


def message_text(content) -> str:
    """Flatten chat model content, which may be a string or a list of parts."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ChatModelProvider:
    """One Gemini model with its own timeout. Calling it returns the answer text."""

    def __init__(self, model: str, timeout: float, **model_kwargs) -> None:
        self.model = model
        self.timeout = timeout
        self.model_kwargs = model_kwargs

    async def __call__(self, messages: List[BaseMessage]) -> str:
        chat = get_chat_model(model=self.model, **self.model_kwargs)
        result = await asyncio.wait_for(chat.ainvoke(messages), timeout=self.timeout)
        return message_text(result.content)


def query_generator(provider: TextGenerator, system_prompt: str) -> QueryGenerator:
    """Wrap a provider so it takes a single user query under a fixed system prompt."""
    prompt = ChatPromptTemplate.from_messages(
        [("system", "{system_prompt}"), ("human", "{query}")]
    )

    async def generate(query: str) -> str:
        messages = prompt.format_messages(system_prompt=system_prompt, query=query)
        return await provider(messages)

    return generate
