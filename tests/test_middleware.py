import pytest

from luis_mail.core.config import Config
from luis_mail.core.contracts import MailContext
from luis_mail.core.middleware import SKILL_KEY, luis_middleware
from luis_mail.core.pipeline import Pipeline
from fakes import FakeAdapter, LUIS_RESPONSE

pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
def reset_config():
    original = Config.LUIS_ENDPOINT
    Config.LUIS_ENDPOINT = "https://example.com/nlu?q="
    yield
    Config.LUIS_ENDPOINT = original


class NextCounter:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


async def test_attaches_raw_result():
    ctx = MailContext(subject="find", body="shoes")
    call_next = NextCounter()

    await luis_middleware(adapter=FakeAdapter(response=LUIS_RESPONSE))(ctx, call_next)

    assert ctx.skills[SKILL_KEY] == LUIS_RESPONSE
    assert call_next.calls == 1


async def test_failure_attaches_descriptor_and_continues():
    ctx = MailContext(subject="find", body="shoes")
    call_next = NextCounter()

    await luis_middleware(adapter=FakeAdapter(error=ValueError("Expecting value")))(ctx, call_next)

    assert ctx.skills[SKILL_KEY] == {"status": "error", "message": "Expecting value"}
    assert call_next.calls == 1


async def test_unexpected_exception_is_contained():
    ctx = MailContext(subject="find", body="shoes")
    call_next = NextCounter()

    await luis_middleware(adapter=FakeAdapter(error=RuntimeError("adapter exploded")))(ctx, call_next)

    assert ctx.skills[SKILL_KEY] == {"status": "error", "message": "adapter exploded"}
    assert call_next.calls == 1


async def test_downstream_error_propagates_without_second_next():
    ctx = MailContext(subject="find", body="shoes")
    calls = []

    async def call_next():
        calls.append(1)
        raise KeyError("downstream")

    with pytest.raises(KeyError):
        await luis_middleware(adapter=FakeAdapter(response=LUIS_RESPONSE))(ctx, call_next)
    assert calls == [1]


async def test_settings_applied_per_call():
    adapter = FakeAdapter(response=LUIS_RESPONSE)
    ctx = MailContext(subject="a", body="b")

    await luis_middleware({"endpoint": "https://other.example/q="}, adapter)(ctx, NextCounter())

    assert Config.LUIS_ENDPOINT == "https://other.example/q="
    assert adapter.calls == ["https://other.example/q=a%20b"]


async def test_keeps_existing_skills():
    ctx = MailContext(subject="a", body="b", skills={"other": {"x": 1}})
    await luis_middleware(adapter=FakeAdapter(response=LUIS_RESPONSE))(ctx, NextCounter())
    assert ctx.skills["other"] == {"x": 1}
    assert SKILL_KEY in ctx.skills


async def test_in_pipeline_downstream_sees_result():
    seen = []

    async def downstream(ctx, call_next):
        seen.append(ctx.skills[SKILL_KEY]["topScoringIntent"]["intent"])
        await call_next()

    pipeline = Pipeline(luis_middleware(adapter=FakeAdapter(response=LUIS_RESPONSE)), downstream)
    assert await pipeline.run(MailContext(subject="a", body="b")) is True
    assert seen == ["Shopping.FindItem"]


async def test_bad_settings_become_descriptor_and_continue():
    ctx = MailContext(subject="a", body="b")
    call_next = NextCounter()

    await luis_middleware({"endpoint": "https://e/q=", "timeout": "soon"}, FakeAdapter(response=LUIS_RESPONSE))(ctx, call_next)

    assert ctx.skills[SKILL_KEY]["status"] == "error"
    assert "soon" in ctx.skills[SKILL_KEY]["message"]
    assert call_next.calls == 1
