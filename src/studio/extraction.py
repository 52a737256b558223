"""
Extraction: product image or product page → productName / mainProblem / keyBenefit.

Both entry points send one schema-constrained Gemini call, validate the JSON
and merge it into the session's ProductContext. Failures leave the context
as it was and set one error message.
"""
from typing import Optional, Union

from tools.console import error, log
from tools.errors import InvocationError, SchemaViolationError, ValidationError
from tools.image_input import ImagePayload, get_image_dimensions, load_image
from tools.model_invoker import Invoker, invoke
from tools.schemas import extraction_schema, parse_extracted_info
from .operations import OperationState
from .session import StudioSession, get_session
from .state import ProductContext, require_url


IMAGE_INVALID_FORMAT = "AI returned an invalid format. Please try again or fill manually."
IMAGE_FAILED = "Failed to analyze image. Please fill details manually."
URL_INVALID_FORMAT = "AI returned an invalid format for this URL. Please fill manually."
URL_FAILED = "Failed to analyze URL. Please check the link or fill manually."


IMAGE_PROMPT = """Analyze this product image. Extract details for a UGC video script.
Return a JSON object with:
- productName: Name/type of product.
- mainProblem: The specific pain point this product solves.
- keyBenefit: The primary selling point.

Be concise and marketing-focused."""


URL_PROMPT = """Analyze the content of this URL: {url}. Extract details for a UGC video script.
Open the page with your URL reading tool and base your answer on what it says.
Return a JSON object with:
- productName: Name/type of product.
- mainProblem: The specific pain point this product solves.
- keyBenefit: The primary selling point.

Be concise and marketing-focused."""


async def _extract(
    session: StudioSession,
    invoker: Invoker,
    prompt: str,
    *,
    source: str,
    invalid_message: str,
    failed_message: str,
    image: Optional[ImagePayload] = None,
    read_urls: bool = False,
) -> Optional[ProductContext]:
    """Call the model, parse, merge. Returns the merged context, or None on failure."""
    try:
        raw_text = await invoker(
            prompt,
            extraction_schema(),
            image=image,
            read_urls=read_urls,
            empty_default="{}",
        )
        info = parse_extracted_info(raw_text)
    except InvocationError as e:
        error(f"{source} analysis error", e.__cause__ or e)
        session.error = failed_message
        return None
    except SchemaViolationError as e:
        error(f"Failed to parse {source} analysis result: {e.raw_text!r}")
        session.error = invalid_message
        return None

    # Merge into whatever the context is now, not what it was before the call
    session.context = session.context.merged_with(info)
    log(f"✓ Extracted from {source}: {session.context.product_name}")
    return session.context


async def analyze_image(
    image: Union[bytes, str],
    mime_type: Optional[str] = None,
    *,
    session: Optional[StudioSession] = None,
    invoker: Optional[Invoker] = None,
) -> Optional[ProductContext]:
    """
    Extract product details from a product photo.

    Args:
        image: Raw image bytes, or a base64 data URL
        mime_type: MIME type if known (sniffed otherwise)
        session: Session to update (defaults to the current session)
        invoker: Model call (defaults to Gemini)

    Returns:
        The merged ProductContext, or None if anything failed
        (session.error says what)

    Raises:
        OperationInProgressError: an image analysis is already running
    """
    session = session or get_session()
    invoker = invoker or invoke

    try:
        payload = load_image(image, mime_type)
    except ValidationError as e:
        session.error = str(e)
        return None

    with session.operations.track(OperationState.ANALYZING_IMAGE):
        session.image = payload
        session.error = None

        width, height = get_image_dimensions(payload.data)
        log(f"🔍 Analyzing product image ({payload.mime_type}, {width}×{height})")

        return await _extract(
            session,
            invoker,
            IMAGE_PROMPT,
            source="image",
            invalid_message=IMAGE_INVALID_FORMAT,
            failed_message=IMAGE_FAILED,
            image=payload,
        )


async def analyze_url(
    url: Optional[str] = None,
    *,
    session: Optional[StudioSession] = None,
    invoker: Optional[Invoker] = None,
) -> Optional[ProductContext]:
    """
    Extract product details from a product page.

    Args:
        url: Product URL. Written to the context once the analysis starts;
            when omitted the context's current product_url is used.
        session: Session to update (defaults to the current session)
        invoker: Model call (defaults to Gemini)

    Returns:
        The merged ProductContext, or None if anything failed

    Raises:
        OperationInProgressError: a URL analysis is already running
    """
    session = session or get_session()
    invoker = invoker or invoke

    typed_url = url
    try:
        url = require_url(typed_url if typed_url is not None else session.context.product_url)
    except ValidationError as e:
        session.error = str(e)
        return None

    # A rejected trigger must not touch the context, so write the URL only once running
    with session.operations.track(OperationState.ANALYZING_URL):
        if typed_url is not None:
            session.update_context(product_url=typed_url)
        session.error = None
        log(f"🔗 Analyzing product URL: {url}")

        return await _extract(
            session,
            invoker,
            URL_PROMPT.format(url=url),
            source="URL",
            invalid_message=URL_INVALID_FORMAT,
            failed_message=URL_FAILED,
            read_urls=True,
        )
