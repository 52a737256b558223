"""
Schema-constrained Gemini calls.

One request per call: a text prompt, optionally an inline image or the
url_context tool, and a required JSON output schema. Returns the raw text;
callers parse and validate it. No retries, no timeouts.
"""
from typing import Awaitable, Callable, Optional

from google.genai import types

from config import Config, get_genai_client
from .errors import InvocationError
from .image_input import ImagePayload
from .console import debug


# Signature shared by invoke() and the fakes used in tests
Invoker = Callable[..., Awaitable[str]]


def build_request_config(output_schema: dict, read_urls: bool = False) -> dict:
    """Generation config asking for JSON that matches output_schema."""
    config = {
        "response_mime_type": "application/json",
        "response_json_schema": output_schema,
    }
    if read_urls:
        config["tools"] = [types.Tool(url_context=types.UrlContext())]
    return config


def build_contents(prompt: str, image: Optional[ImagePayload] = None) -> list[types.Content]:
    parts = [types.Part.from_text(text=prompt)]
    if image is not None:
        parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))
    return [types.Content(role="user", parts=parts)]


async def invoke(
    prompt: str,
    output_schema: dict,
    *,
    image: Optional[ImagePayload] = None,
    read_urls: bool = False,
    empty_default: str = "{}",
    client=None,
) -> str:
    """
    Send a schema-constrained request to Gemini.

    Args:
        prompt: Instruction text
        output_schema: JSON schema the response must attempt to match
        image: Optional inline image sent after the prompt
        read_urls: Enable the url_context tool so the model can read URLs in the prompt
        empty_default: Returned when the response has no text ("{}" or "[]")
        client: genai.Client to use (defaults to get_genai_client())

    Returns:
        Raw response text. Not guaranteed to be valid JSON.

    Raises:
        InvocationError: client setup, network or model failure
    """
    contents = build_contents(prompt, image)
    config = build_request_config(output_schema, read_urls=read_urls)

    debug(f"Gemini call: model={Config.MODEL_NAME} image={image!r} read_urls={read_urls}")

    try:
        client = client or get_genai_client()
        response = await client.aio.models.generate_content(
            model=Config.MODEL_NAME,
            contents=contents,
            config=config,
        )
        text = response.text
    except Exception as e:
        raise InvocationError(f"Gemini call failed: {e}") from e

    debug(f"Gemini response: {text!r}")
    return text or empty_default
