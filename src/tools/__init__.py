"""
Tool exports: Gemini calls, schemas, image input, clipboard.
"""
from .errors import (
    StudioError,
    ValidationError,
    InvocationError,
    SchemaViolationError,
    OperationInProgressError,
    ClipboardError,
)
from .schemas import (
    ExtractedProductInfo,
    ScriptVariation,
    extraction_schema,
    variation_schema,
    variation_set_schema,
    parse_extracted_info,
    parse_variation_set,
)
from .image_input import ImagePayload, load_image, require_image
from .model_invoker import invoke
from .clipboard import Clipboard, CommandClipboard, TkClipboard

__all__ = [
    "StudioError",
    "ValidationError",
    "InvocationError",
    "SchemaViolationError",
    "OperationInProgressError",
    "ClipboardError",
    "ExtractedProductInfo",
    "ScriptVariation",
    "extraction_schema",
    "variation_schema",
    "variation_set_schema",
    "parse_extracted_info",
    "parse_variation_set",
    "ImagePayload",
    "load_image",
    "require_image",
    "invoke",
    "Clipboard",
    "CommandClipboard",
    "TkClipboard",
]
