"""
Generation: ProductContext → 3 UGC script variations.

One schema-constrained Gemini call per run. The result set is swapped in
whole on success; on failure it stays empty.
"""
from typing import Optional

from tools.console import error, log, warn
from tools.errors import InvocationError, SchemaViolationError, ValidationError
from tools.model_invoker import Invoker, invoke
from tools.schemas import ScriptVariation, parse_variation_set, variation_set_schema
from .operations import OperationState
from .session import StudioSession, get_session
from .state import ProductContext, require_product_details


VARIATION_COUNT = 3

GENERATE_INVALID_FORMAT = "AI returned an invalid format. Please try again."
GENERATE_FAILED = "Failed to generate scripts. Please try again."


GENERATION_PROMPT = """Generate {count} professional UGC video scripts for "{product_name}".
{url_line}Problem: {main_problem}
Benefit: {key_benefit}
Tone: {tone}
Duration: {duration}s (~{word_budget} words).

CONTEXT:
- Automatically determine the most likely target audience.
- Optimize for high-engagement short-form platforms (TikTok, Reels, Shorts).
- Structure: Hook → Problem → Solution → CTA.
- Style: Natural, conversational, creator-led.
- Ensure each script is distinct and creative.

STRICT JSON OUTPUT:
Return an array of {count} objects, each with: id (number), hook (string), problem (string), solution (string), cta (string)."""


def build_generation_prompt(context: ProductContext) -> str:
    """Fill the generation prompt. The URL line only appears when there is a URL."""
    url_line = f"Product URL for context: {context.product_url.strip()}\n" if context.has_url else ""
    return GENERATION_PROMPT.format(
        count=VARIATION_COUNT,
        product_name=context.product_name,
        url_line=url_line,
        main_problem=context.main_problem,
        key_benefit=context.key_benefit,
        tone=context.tone_style.value,
        duration=int(context.duration),
        word_budget=context.duration.word_budget,
    )


async def generate_scripts(
    *,
    session: Optional[StudioSession] = None,
    invoker: Optional[Invoker] = None,
) -> Optional[tuple[ScriptVariation, ...]]:
    """
    Generate script variations from the session's product context.

    Args:
        session: Session to read and update (defaults to the current session)
        invoker: Model call (defaults to Gemini)

    Returns:
        The new variations in response order, or None on failure
        (session.error says what)

    Raises:
        OperationInProgressError: a generation is already running
    """
    session = session or get_session()
    invoker = invoker or invoke

    try:
        require_product_details(session.context)
    except ValidationError as e:
        session.error = str(e)
        return None

    with session.operations.track(OperationState.GENERATING):
        session.error = None
        session.variations = ()

        context = session.context
        log(f"✍️  Generating {VARIATION_COUNT} scripts for {context.product_name} "
            f"({context.tone_style.value}, {int(context.duration)}s)")

        try:
            raw_text = await invoker(
                build_generation_prompt(context),
                variation_set_schema(),
                read_urls=context.has_url,
                empty_default="[]",
            )
            variations = parse_variation_set(raw_text)
        except InvocationError as e:
            error("Generation error", e.__cause__ or e)
            session.error = GENERATE_FAILED
            return None
        except SchemaViolationError as e:
            error(f"Failed to parse generation result: {e.raw_text!r}")
            session.error = GENERATE_INVALID_FORMAT
            return None

        if len(variations) != VARIATION_COUNT:
            warn(f"Asked for {VARIATION_COUNT} scripts, got {len(variations)}")

        session.variations = variations
        log(f"✓ {len(variations)} scripts ready")
        return variations
