import pytest

from luis_mail.app import build_pipeline, parse_line
from luis_mail.core.config import Config
from luis_mail.core.middleware import SKILL_KEY
from fakes import FakeAdapter, LUIS_RESPONSE

pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
def reset_config():
    original = Config.LUIS_ENDPOINT
    yield
    Config.LUIS_ENDPOINT = original


async def test_pipeline_smoke(capsys):
    adapter = FakeAdapter(response=LUIS_RESPONSE)
    pipeline = build_pipeline({"endpoint": "https://example.com/nlu?q="}, adapter)

    ctx = parse_line("<b>Looking</b> for | red shoes now")
    done = await pipeline.run(ctx)

    assert done is True
    assert adapter.calls == ["https://example.com/nlu?q=Looking%20for%20red%20shoes%20now"]
    assert ctx.skills[SKILL_KEY] == LUIS_RESPONSE

    out = capsys.readouterr().out
    assert "Top intent: Shopping.FindItem" in out
    assert '"red shoes"' in out


async def test_pipeline_smoke_error_continues(capsys):
    pipeline = build_pipeline({"endpoint": ""}, FakeAdapter(response=LUIS_RESPONSE))

    ctx = parse_line("just a body")
    done = await pipeline.run(ctx)

    assert done is True
    assert ctx.skills[SKILL_KEY]["status"] == "error"
    assert "LUIS error" in capsys.readouterr().out


async def test_parse_line():
    ctx = parse_line("subject | body | more")
    assert ctx.subject == "subject"
    assert ctx.body == "body | more"
    assert parse_line("only body").subject == ""
