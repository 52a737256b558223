"""
Shared fixtures: a fresh session, a fake model invoker and a tiny PNG.
"""
import io
import json

import pytest
from PIL import Image

from studio.session import StudioSession


class FakeInvoker:
    """
    Stands in for tools.model_invoker.invoke.

    Records every call; returns `response` or raises `error`. `on_call`
    runs inside the call, while the pipeline is suspended.
    """

    def __init__(self, response="{}", error=None, on_call=None):
        self.response = response if isinstance(response, str) else json.dumps(response)
        self.error = error
        self.on_call = on_call
        self.calls = []

    async def __call__(self, prompt, output_schema, **kwargs):
        self.calls.append({"prompt": prompt, "schema": output_schema, **kwargs})
        if self.on_call is not None:
            await self.on_call()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def session():
    return StudioSession()


@pytest.fixture
def fake_invoker():
    return FakeInvoker


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 6), color=(200, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def three_variations():
    return [
        {"id": i, "hook": f"hook {i}", "problem": f"problem {i}",
         "solution": f"solution {i}", "cta": f"cta {i}"}
        for i in (1, 2, 3)
    ]
