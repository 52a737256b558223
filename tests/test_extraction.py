"""
Extraction pipeline: image / URL → ProductContext.
"""
import asyncio
import base64

import pytest

from studio.extraction import (
    IMAGE_FAILED,
    IMAGE_INVALID_FORMAT,
    URL_FAILED,
    URL_INVALID_FORMAT,
    analyze_image,
    analyze_url,
)
from studio.operations import OperationState
from studio.state import URL_MISSING, ProductContext
from tools.errors import InvocationError, OperationInProgressError
from tools.image_input import NOT_AN_IMAGE


GLOW = {
    "productName": "Glow Serum",
    "mainProblem": "dull skin",
    "keyBenefit": "radiant glow in 7 days",
}


def prefilled():
    return ProductContext(
        product_name="Old Name",
        main_problem="old problem",
        key_benefit="old benefit",
    )


# ─────────────────────────────────────────────────────────────
# Image
# ─────────────────────────────────────────────────────────────

def test_image_extraction_updates_context(session, fake_invoker, png_bytes):
    invoker = fake_invoker(response=GLOW)

    result = asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    assert (session.context.product_name, session.context.main_problem, session.context.key_benefit) == (
        "Glow Serum", "dull skin", "radiant glow in 7 days"
    )
    assert result is session.context
    assert session.error is None
    assert not session.operations.analyzing
    assert session.image.mime_type == "image/png"


def test_image_is_attached_to_the_call(session, fake_invoker, png_bytes):
    invoker = fake_invoker(response=GLOW)

    asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    call = invoker.calls[0]
    assert call["image"].data == png_bytes
    assert call["read_urls"] is False
    assert call["empty_default"] == "{}"
    assert call["schema"]["required"] == ["productName", "mainProblem", "keyBenefit"]
    assert "productName" in call["prompt"]


def test_data_url_input(session, fake_invoker, png_bytes):
    data_url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
    invoker = fake_invoker(response=GLOW)

    asyncio.run(analyze_image(data_url, session=session, invoker=invoker))

    assert invoker.calls[0]["image"].data == png_bytes
    assert session.context.product_name == "Glow Serum"


def test_empty_extracted_fields_keep_prior_values(session, fake_invoker, png_bytes):
    session.context = prefilled()
    invoker = fake_invoker(response={"productName": "New Name", "mainProblem": "", "keyBenefit": None})

    asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    assert session.context.product_name == "New Name"
    assert session.context.main_problem == "old problem"
    assert session.context.key_benefit == "old benefit"


def test_busy_flag_is_set_during_call(session, fake_invoker, png_bytes):
    seen = {}

    async def capture():
        seen.update(session.operations.snapshot())

    invoker = fake_invoker(response=GLOW, on_call=capture)
    asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    assert seen["analyzing"] is True
    assert seen["fetching_url"] is False
    assert seen["state"] == "analyzing-image"
    assert not session.operations.analyzing


def test_invalid_json_leaves_context_untouched(session, fake_invoker, png_bytes):
    session.context = prefilled()
    invoker = fake_invoker(response="not json")

    result = asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    assert result is None
    assert session.context == prefilled()
    assert session.error == IMAGE_INVALID_FORMAT
    assert not session.operations.analyzing


def test_invocation_failure_sets_distinct_message(session, fake_invoker, png_bytes):
    session.context = prefilled()
    invoker = fake_invoker(error=InvocationError("network down"))

    result = asyncio.run(analyze_image(png_bytes, session=session, invoker=invoker))

    assert result is None
    assert session.context == prefilled()
    assert session.error == IMAGE_FAILED
    assert not session.operations.analyzing


def test_previous_error_is_cleared_on_start(session, fake_invoker, png_bytes):
    session.error = "old error"
    seen = {}

    async def capture():
        seen["error"] = session.error

    asyncio.run(analyze_image(png_bytes, session=session, invoker=fake_invoker(response=GLOW, on_call=capture)))

    assert seen["error"] is None
    assert session.error is None


def test_non_image_is_rejected_without_a_call(session, fake_invoker):
    invoker = fake_invoker(response=GLOW)

    result = asyncio.run(analyze_image(b"%PDF-1.7 not an image", session=session, invoker=invoker))

    assert result is None
    assert invoker.calls == []
    assert session.error == NOT_AN_IMAGE
    assert session.image is None


def test_second_image_analysis_is_rejected_while_first_runs(session, fake_invoker, png_bytes):
    async def scenario():
        started = asyncio.Event()
        release = asyncio.Event()

        async def hold():
            started.set()
            await release.wait()

        invoker = fake_invoker(response=GLOW, on_call=hold)
        first = asyncio.create_task(analyze_image(png_bytes, session=session, invoker=invoker))
        await started.wait()

        with pytest.raises(OperationInProgressError):
            await analyze_image(png_bytes, session=session, invoker=invoker)

        release.set()
        return await first, invoker

    result, invoker = asyncio.run(scenario())

    assert result.product_name == "Glow Serum"
    assert len(invoker.calls) == 1


def test_stale_response_after_reset_still_writes(session, fake_invoker, png_bytes):
    async def scenario():
        started = asyncio.Event()
        release = asyncio.Event()

        async def hold():
            started.set()
            await release.wait()

        task = asyncio.create_task(
            analyze_image(png_bytes, session=session, invoker=fake_invoker(response=GLOW, on_call=hold))
        )
        await started.wait()
        session.reset()
        release.set()
        await task

    asyncio.run(scenario())

    assert session.context.product_name == "Glow Serum"


# ─────────────────────────────────────────────────────────────
# URL
# ─────────────────────────────────────────────────────────────

def test_url_extraction_reads_the_page(session, fake_invoker):
    invoker = fake_invoker(response=GLOW)
    seen = {}

    async def capture():
        seen.update(session.operations.snapshot())

    invoker.on_call = capture
    result = asyncio.run(analyze_url("https://shop.example.com/glow", session=session, invoker=invoker))

    call = invoker.calls[0]
    assert "https://shop.example.com/glow" in call["prompt"]
    assert call["read_urls"] is True
    assert call["image"] is None
    assert seen["fetching_url"] is True and seen["analyzing"] is True
    assert result.product_name == "Glow Serum"
    assert session.context.product_url == "https://shop.example.com/glow"
    assert not session.operations.fetching_url


def test_url_defaults_to_context_url(session, fake_invoker):
    session.update_context(product_url="https://shop.example.com/mug")
    invoker = fake_invoker(response=GLOW)

    asyncio.run(analyze_url(session=session, invoker=invoker))

    assert "https://shop.example.com/mug" in invoker.calls[0]["prompt"]


@pytest.mark.parametrize("url", ["", "   "])
def test_missing_url_fails_fast(session, fake_invoker, url):
    session.error = "old error"
    invoker = fake_invoker(response=GLOW)
    seen = []

    result = asyncio.run(analyze_url(url, session=session, invoker=invoker))
    seen.append(session.operations.fetching_url)

    assert result is None
    assert invoker.calls == []
    assert session.error == URL_MISSING
    assert seen == [False]


def test_url_invalid_format(session, fake_invoker):
    session.context = prefilled()
    invoker = fake_invoker(response='{"somethingElse": true}')

    asyncio.run(analyze_url("https://example.com", session=session, invoker=invoker))

    assert session.error == URL_INVALID_FORMAT
    assert session.context.product_name == "Old Name"


def test_url_invocation_failure(session, fake_invoker):
    invoker = fake_invoker(error=InvocationError("timeout"))

    asyncio.run(analyze_url("https://example.com", session=session, invoker=invoker))

    assert session.error == URL_FAILED
    assert not session.operations.analyzing


def test_rejected_url_trigger_keeps_context_url(session, fake_invoker):
    session.update_context(product_url="https://a.example")
    session.operations.begin(OperationState.ANALYZING_URL)
    invoker = fake_invoker(response=GLOW)

    with pytest.raises(OperationInProgressError):
        asyncio.run(analyze_url("https://b.example", session=session, invoker=invoker))

    assert session.context.product_url == "https://a.example"
    assert invoker.calls == []
