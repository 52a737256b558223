"""State definitions for the script studio."""
from dataclasses import dataclass, replace
from enum import Enum, IntEnum

from tools.errors import ValidationError
from tools.schemas import ExtractedProductInfo


DETAILS_MISSING = "Please provide product details to generate scripts."
URL_MISSING = "Please provide a product URL."


class ToneStyle(str, Enum):
    ENERGETIC = "Energetic"
    CASUAL = "Casual"
    BOLD = "Bold"
    EMOTIONAL = "Emotional"


class Duration(IntEnum):
    """Target video length in seconds."""
    SHORT = 10
    STANDARD = 15

    @property
    def word_budget(self) -> int:
        """Roughly two spoken words per second."""
        return 20 if self is Duration.SHORT else 30


@dataclass(frozen=True)
class ProductContext:
    """
    What we know about the product. Read by generation, written by
    extraction and by direct edits.

    Frozen: every write builds a new value and swaps it in whole, so two
    completions racing each other are last-write-wins, never mixed.
    """
    product_name: str = ""
    product_url: str = ""
    main_problem: str = ""
    key_benefit: str = ""
    tone_style: ToneStyle = ToneStyle.ENERGETIC
    duration: Duration = Duration.SHORT

    def __post_init__(self):
        # Accept plain values ("Bold", 15) from edit forms
        object.__setattr__(self, "tone_style", ToneStyle(self.tone_style))
        object.__setattr__(self, "duration", Duration(int(self.duration)))

    def missing_details(self) -> list[str]:
        """Names of the required fields that are still blank."""
        required = {
            "product_name": self.product_name,
            "main_problem": self.main_problem,
            "key_benefit": self.key_benefit,
        }
        return [name for name, value in required.items() if not value.strip()]

    @property
    def has_url(self) -> bool:
        return bool(self.product_url.strip())

    def merged_with(self, info: ExtractedProductInfo) -> "ProductContext":
        """Replace each field the extraction filled in; blank or whitespace-only values keep the prior value."""
        return replace(
            self,
            product_name=info.product_name.strip() or self.product_name,
            main_problem=info.main_problem.strip() or self.main_problem,
            key_benefit=info.key_benefit.strip() or self.key_benefit,
        )

    def cleared(self) -> "ProductContext":
        """Blank product fields; tone and duration are preferences and stay."""
        return replace(self, product_name="", product_url="", main_problem="", key_benefit="")


def require_product_details(context: ProductContext) -> None:
    """
    Raises:
        ValidationError: product name, problem or benefit is blank
    """
    if context.missing_details():
        raise ValidationError(DETAILS_MISSING)


def require_url(url: str) -> str:
    """
    Raises:
        ValidationError: URL is blank
    """
    url = (url or "").strip()
    if not url:
        raise ValidationError(URL_MISSING)
    return url
