"""
Decoding of the model's structured analysis block.
"""

from pydantic import ValidationError

from term_intel.comprehension.models import AnalysisResult
from term_intel.core.exceptions import ParsingError


def parse_analysis(text: str) -> AnalysisResult:
    """
    Decode a JSON analysis object.

    Args:
        text: JSON text, normally the interior of a fenced block

    Returns:
        Validated AnalysisResult

    Raises:
        ParsingError: On malformed JSON, missing fields or wrong types
    """
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as e:
        fields = sorted({
            ".".join(str(part) for part in err["loc"])
            for err in e.errors()
            if err.get("loc")
        })
        raise ParsingError(
            f"Invalid analysis response ({e.error_count()} errors)",
            details={"fields": fields, "error": str(e)},
        ) from e
