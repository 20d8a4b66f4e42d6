from types import SimpleNamespace

import pytest

from csust_auth.services import captcha
from csust_auth.services.errors import CaptchaRetrievalFailed


@pytest.mark.asyncio
@pytest.mark.parametrize("need", [True, False])
async def test_needs_captcha_reads_is_need(helper, server, need) -> None:
    server.need_captcha = need
    assert await captcha.needs_captcha(helper.session, "u1") is need


@pytest.mark.asyncio
async def test_needs_captcha_is_never_cached(helper, server, monkeypatch) -> None:
    clock = iter([1700000000.000, 1700000000.250])
    monkeypatch.setattr(captcha, "time", SimpleNamespace(time=lambda: next(clock)))

    assert await captcha.needs_captcha(helper.session, "u1") is False
    server.need_captcha = True
    assert await captcha.needs_captcha(helper.session, "u1") is True

    reqs = server.requests_to("/authserver/checkNeedCaptcha.htl")
    assert len(reqs) == 2
    assert [r.url.params["username"] for r in reqs] == ["u1", "u1"]
    assert [r.url.params["_"] for r in reqs] == ["1700000000000", "1700000000250"]


@pytest.mark.asyncio
async def test_get_captcha_returns_image(helper, server) -> None:
    assert await helper.get_captcha() == server.captcha_image


@pytest.mark.asyncio
async def test_get_captcha_empty_body(helper, server) -> None:
    server.captcha_image = b""
    with pytest.raises(CaptchaRetrievalFailed):
        await helper.get_captcha()
