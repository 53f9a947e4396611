import asyncio

from shopgenie.catalog import PRODUCTS
from shopgenie.services.advice import (
    ADVICE_EMPTY,
    ADVICE_FAILED,
    ADVICE_NO_KEY,
    INSIGHT_FAILED,
    INSIGHT_NO_KEY,
    WELCOME,
    AdviceService,
    AdviceThread,
    InsightTracker,
    sanitize_insight,
)


class DummyResponse:
    def __init__(self, text):
        self.text = text


class DummyModels:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return DummyResponse(self.reply)


class DummyAio:
    def __init__(self, models):
        self.models = models


class DummyClient:
    def __init__(self, models):
        self.aio = DummyAio(models)


def _service(models, **kwargs) -> AdviceService:
    return AdviceService(api_key="test-key", model="gemini-test", client=DummyClient(models), products=PRODUCTS, **kwargs)


def test_missing_key_returns_fallbacks() -> None:
    service = AdviceService(api_key="")
    assert asyncio.run(service.get_advice("gift ideas?")) == ADVICE_NO_KEY
    assert asyncio.run(service.get_insight("Mat", "Grip")) == INSIGHT_NO_KEY


def test_advice_prompt_carries_catalog_and_history() -> None:
    models = DummyModels(reply="Try the Yoga Mat Pro!")
    text = asyncio.run(_service(models).get_advice("something for yoga", ["user: hi", "model: hello"]))

    assert text == "Try the Yoga Mat Pro!"
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert "Yoga Mat Pro ($55.0) - Sports" in call["contents"]
    assert "model: hello" in call["contents"]
    assert '"something for yoga"' in call["contents"]


def test_advice_errors_become_fallback_text() -> None:
    models = DummyModels(error=RuntimeError("quota exceeded"))
    assert asyncio.run(_service(models).get_advice("hi")) == ADVICE_FAILED


def test_empty_advice_reply() -> None:
    assert asyncio.run(_service(DummyModels(reply=None)).get_advice("hi")) == ADVICE_EMPTY


def test_insight_errors_become_fallback_text() -> None:
    models = DummyModels(error=ConnectionError("offline"))
    assert asyncio.run(_service(models).get_insight("Mat", "Grip")) == INSIGHT_FAILED


def test_insight_is_restricted_to_paragraphs_and_lists() -> None:
    raw = '```html\n<p class="x">Love it</p><script>alert(1)</script><ul><li><b>Yoga</b></li></ul>\n```'
    models = DummyModels(reply=raw)
    text = asyncio.run(_service(models).get_insight("Mat", "Grip"))
    assert text == "<p>Love it</p>alert(1)<ul><li>Yoga</li></ul>"


def test_sanitize_keeps_plain_text() -> None:
    assert sanitize_insight("  just text ") == "just text"


def test_thread_records_conversation() -> None:
    thread = AdviceThread(_service(DummyModels(reply="Sure!")))
    reply = asyncio.run(thread.ask("help me pick"))

    assert reply.text == "Sure!"
    assert [(m.role, m.text) for m in thread.messages] == [
        ("model", WELCOME),
        ("user", "help me pick"),
        ("model", "Sure!"),
    ]
    assert thread.pending is False


def test_thread_ignores_blank_query() -> None:
    thread = AdviceThread(_service(DummyModels(reply="Sure!")))
    assert asyncio.run(thread.ask("   ")) is None
    assert len(thread.messages) == 1


def test_thread_allows_one_pending_request() -> None:
    async def scenario():
        gate = asyncio.Event()

        class SlowModels:
            async def generate_content(self, **kwargs):
                await gate.wait()
                return DummyResponse("done")

        thread = AdviceThread(_service(SlowModels()))
        first = asyncio.create_task(thread.ask("first"))
        await asyncio.sleep(0)

        assert thread.pending is True
        assert await thread.ask("second") is None

        gate.set()
        reply = await first
        return thread, reply

    thread, reply = asyncio.run(scenario())
    assert reply.text == "done"
    assert [m.text for m in thread.messages if m.role == "user"] == ["first"]
    assert thread.pending is False


def test_insight_tracker_drops_stale_response() -> None:
    async def scenario():
        gate = asyncio.Event()

        class Models:
            async def generate_content(self, **kwargs):
                if "Headphones" in kwargs["contents"]:
                    await gate.wait()
                    return DummyResponse("<p>headphones</p>")
                return DummyResponse("<p>watch</p>")

        tracker = InsightTracker(_service(Models()))
        slow = asyncio.create_task(tracker.load(PRODUCTS[0]))
        await asyncio.sleep(0)

        fast = await tracker.load(PRODUCTS[1])
        gate.set()
        stale = await slow
        return tracker, fast, stale

    tracker, fast, stale = asyncio.run(scenario())
    assert fast == "<p>watch</p>"
    assert stale is None
    assert tracker.product_id == "2"
    assert tracker.current == "<p>watch</p>"
    assert tracker.loading is False
