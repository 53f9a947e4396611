from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from google import genai

from shopgenie.config import settings
from shopgenie.models import Product

logger = logging.getLogger(__name__)

ADVICE_NO_KEY = "AI Service is currently unavailable (Missing API Key)."
ADVICE_EMPTY = "I couldn't find an answer for that right now."
ADVICE_FAILED = "I'm having trouble connecting to the brain. Please try again later."

INSIGHT_NO_KEY = "AI Insights unavailable."
INSIGHT_EMPTY = "Could not generate insights."
INSIGHT_FAILED = "Insights currently unavailable."

WELCOME = "Hi! I'm ShopGenie. Looking for a specific gift or need a recommendation?"

_ALLOWED_TAGS = {"p", "ul", "li"}
_TAG_RE = re.compile(r"</?\s*([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>")
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def sanitize_insight(text: str) -> str:
    """Keep only <p>, <ul> and <li> tags (without attributes)."""
    text = _FENCE_RE.sub("", text.strip())

    def _keep(m: re.Match) -> str:
        tag = m.group(1).lower()
        if tag not in _ALLOWED_TAGS:
            return ""
        return f"</{tag}>" if m.group(0).startswith("</") else f"<{tag}>"

    return _TAG_RE.sub(_keep, text).strip()


class AdviceService:
    """
    Адаптер к Gemini. Никогда не бросает исключения наружу: любая ошибка
    превращается в фиксированную строку для показа пользователю.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
        products: Sequence[Product] = (),
    ) -> None:
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model = model or settings.gemini_model
        self.products = tuple(products)
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def _generate(self, prompt: str) -> str:
        resp = await self._get_client().aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        return (getattr(resp, "text", None) or "").strip()

    def _catalog_context(self) -> str:
        return "\n".join(f"{p.name} (${p.price}) - {p.category}" for p in self.products)

    async def get_advice(self, query: str, history: Iterable[str] = ()) -> str:
        if not self.configured:
            return ADVICE_NO_KEY

        prompt = (
            "You are ShopGenie, a helpful and enthusiastic shopping assistant.\n\n"
            f"Our Product Catalog:\n{self._catalog_context()}\n\n"
            "User Chat History:\n" + "\n".join(history) + "\n\n"
            f'Current User Query: "{query}"\n\n'
            "Task: Provide a helpful, concise response. If the user asks for recommendations, "
            "suggest specific products from our catalog. Be friendly and professional. "
            "Keep it under 300 characters if possible."
        )
        try:
            text = await self._generate(prompt)
        except Exception:
            logger.exception("advice request failed")
            return ADVICE_FAILED
        return text or ADVICE_EMPTY

    async def get_insight(self, name: str, description: str) -> str:
        if not self.configured:
            return INSIGHT_NO_KEY

        prompt = (
            f"Product: {name}\n"
            f"Description: {description}\n\n"
            "Write a short, catchy \"Why you'll love this\" summary (max 2 sentences) "
            "and 3 quick bullet points of potential use cases.\n"
            "Format the output as HTML (without <html> tags, just <p> and <ul>)."
        )
        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.warning("insight request failed: %s", e)
            return INSIGHT_FAILED
        text = sanitize_insight(text)
        return text or INSIGHT_EMPTY


@dataclass
class ChatMessage:
    role: str  # user | model
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class AdviceThread:
    """One conversation with the assistant; at most one request in flight."""

    def __init__(self, service: AdviceService) -> None:
        self.service = service
        self.messages: List[ChatMessage] = [ChatMessage(role="model", text=WELCOME, id="welcome")]
        self.pending = False

    async def ask(self, query: str) -> Optional[ChatMessage]:
        query = query.strip()
        if not query or self.pending:
            return None

        history = [f"{m.role}: {m.text}" for m in self.messages]
        self.messages.append(ChatMessage(role="user", text=query))
        self.pending = True
        try:
            text = await self.service.get_advice(query, history)
        finally:
            self.pending = False

        reply = ChatMessage(role="model", text=text)
        self.messages.append(reply)
        return reply


class InsightTracker:
    """
    Insight for the product currently on screen. A response that arrives
    after the user moved on to another product is dropped.
    """

    def __init__(self, service: AdviceService) -> None:
        self.service = service
        self.product_id: Optional[str] = None
        self.current: Optional[str] = None
        self.loading = False
        self._token = 0

    async def load(self, product: Product) -> Optional[str]:
        self._token += 1
        token = self._token
        self.product_id = product.id
        self.current = None
        self.loading = True

        text = await self.service.get_insight(product.name, product.description)

        if token != self._token:
            logger.debug("stale insight for %s dropped", product.id)
            return None
        self.current = text
        self.loading = False
        return text
