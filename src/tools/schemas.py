"""
Structured Output Schemas for Gemini

The same pydantic models instruct the model (via their JSON schema) and
validate what it sends back. Wire names are camelCase; Python attributes are
snake_case.
"""
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaViolationError


EXTRACTION_FIELDS = ("productName", "mainProblem", "keyBenefit")
VARIATION_FIELDS = ("id", "hook", "problem", "solution", "cta")


class ExtractedProductInfo(BaseModel):
    """
    Product facts pulled from an image or a product page.

    Every field is required in the schema sent to the model. Parsing is
    lenient per field (absent or null reads as ""), so the merge step can
    keep prior values for whatever the model left out.
    """
    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(
        default="",
        alias="productName",
        description="Name/type of product.",
    )
    main_problem: str = Field(
        default="",
        alias="mainProblem",
        description="The specific pain point this product solves.",
    )
    key_benefit: str = Field(
        default="",
        alias="keyBenefit",
        description="The primary selling point.",
    )

    @field_validator("product_name", "main_problem", "key_benefit", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class ScriptVariation(BaseModel):
    """One UGC script: Hook → Problem → Solution → CTA."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Ordinal of this variation (1, 2, 3).")
    hook: str = Field(description="Opening line that stops the scroll.")
    problem: str = Field(description="The pain point, in the creator's words.")
    solution: str = Field(description="How the product solves it.")
    cta: str = Field(description="Call to action.")


_VARIATION_SET = TypeAdapter(list[ScriptVariation])


def _strip_defaults(schema: dict) -> dict:
    for prop in schema.get("properties", {}).values():
        prop.pop("default", None)
    return schema


def extraction_schema() -> dict:
    """JSON schema for ExtractedProductInfo with all three fields required."""
    schema = _strip_defaults(ExtractedProductInfo.model_json_schema(by_alias=True))
    schema["required"] = list(EXTRACTION_FIELDS)
    return schema


def variation_schema() -> dict:
    """JSON schema for a single ScriptVariation."""
    return ScriptVariation.model_json_schema()


def variation_set_schema() -> dict:
    """
    JSON schema for an array of ScriptVariation.

    The count (3) is requested in the prompt only; any length validates.
    """
    return {"type": "array", "items": variation_schema()}


# ─────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────

def parse_extracted_info(raw_text: str) -> ExtractedProductInfo:
    """
    Parse an extraction response.

    Raises:
        SchemaViolationError: not JSON, not an object, a field of the wrong
            type, or none of the three fields present
    """
    try:
        info = ExtractedProductInfo.model_validate_json(raw_text)
    except PydanticValidationError as e:
        raise SchemaViolationError(f"Extraction response did not match schema: {e}", raw_text) from e

    if not info.model_fields_set:
        raise SchemaViolationError("Extraction response carried none of the expected fields", raw_text)

    return info


def parse_variation_set(raw_text: str) -> tuple[ScriptVariation, ...]:
    """
    Parse a generation response into variations, in response order.

    Raises:
        SchemaViolationError: not a JSON array, or an element missing a field
    """
    try:
        return tuple(_VARIATION_SET.validate_json(raw_text))
    except PydanticValidationError as e:
        raise SchemaViolationError(f"Generation response did not match schema: {e}", raw_text) from e
