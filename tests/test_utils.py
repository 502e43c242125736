"""Tests for the logging helpers."""

import pytest

from storefront.models import MultipartPayload, User
from storefront.utils import log_operation, redact, strip_secrets


def test_redact_hides_secrets_and_summarizes_files():
    payload = MultipartPayload(
        fields={"email": "a@x.cl", "password": "pw"},
        files={"image": ("a.png", b"1234", "image/png")},
    )

    assert redact(payload) == {
        "email": "a@x.cl",
        "password": "[hidden]",
        "image": {"fileName": "a.png", "fileType": "image/png", "size": 4},
    }
    assert redact([{"authToken": "t"}]) == [{"authToken": "[hidden]"}]
    assert "password" not in redact(User(email="a@x.cl", password="pw"))


def test_strip_secrets():
    assert strip_secrets({"email": "a@x.cl", "clave_hash": "h", "password": "pw"}) == {"email": "a@x.cl"}
    assert strip_secrets(User(email="a@x.cl", password="pw")).password is None


@pytest.mark.asyncio
async def test_log_operation_reraises_original_error():
    @log_operation
    async def explode(value):
        raise KeyError(value)

    @log_operation
    async def echo(value, suffix="!"):
        return value + suffix

    with pytest.raises(KeyError):
        await explode("x")
    assert await echo("hola") == "hola!"
