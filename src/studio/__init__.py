"""
Script studio package.

Flow:
    image / URL → extraction → ProductContext (editable)
                → generation → 3 ScriptVariations → clipboard export

Usage:
    import asyncio
    from studio import get_session, analyze_url, generate_scripts

    session = get_session()
    asyncio.run(analyze_url("https://example.com/product"))
    asyncio.run(generate_scripts())
    print(session.variations)
"""
from .state import ProductContext, ToneStyle, Duration, require_product_details, require_url
from .operations import OperationState, OperationTracker
from .session import StudioSession, get_session, reset_session, end_session
from .extraction import analyze_image, analyze_url
from .generation import generate_scripts, build_generation_prompt
from .export import copy_one, copy_all, format_variation, format_variations, parse_variations_text

__all__ = [
    "ProductContext",
    "ToneStyle",
    "Duration",
    "require_product_details",
    "require_url",
    "OperationState",
    "OperationTracker",
    "StudioSession",
    "get_session",
    "reset_session",
    "end_session",
    "analyze_image",
    "analyze_url",
    "generate_scripts",
    "build_generation_prompt",
    "copy_one",
    "copy_all",
    "format_variation",
    "format_variations",
    "parse_variations_text",
]
