"""
Resume Data Sanitizers
Data-quality passes applied before structured data or metadata leaves the service
"""
import copy
import json
import re
import unicodedata
from typing import Any, Dict, Union

from pydantic import ValidationError as PydanticValidationError

from domain.value_objects import CVProcessedData


CERTIFICATION_DATE_FIELDS = ("dateObtained", "issueDate", "expiryDate", "date")
CERTIFICATION_DATE_PATTERN = re.compile(r"^(0[1-9]|1[0-2])\s+\d{4}$")


class StructuredDataError(ValueError):
    """Structured data does not match the CV shape"""


def is_valid_certification_date(value: str) -> bool:
    """'MM YYYY' (month 01-12) or empty"""
    return value == "" or bool(CERTIFICATION_DATE_PATTERN.match(value))


def sanitize_certification_dates(structured_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Blank certification dates that are not 'MM YYYY' strings (null and
    numbers included). Mutates and returns the tree.
    """
    certifications = structured_data.get("certifications")
    if not isinstance(certifications, list):
        return structured_data

    for cert in certifications:
        if not isinstance(cert, dict):
            continue
        for field in CERTIFICATION_DATE_FIELDS:
            if field not in cert:
                continue
            value = cert[field]
            if not isinstance(value, str) or not is_valid_certification_date(value):
                cert[field] = ""
    return structured_data


def sanitize_structured_data(data: Union[Dict[str, Any], str, bytes]) -> Dict[str, Any]:
    """Decode into a generic tree and run the sanitization pass over it"""
    if isinstance(data, (str, bytes)):
        try:
            tree = json.loads(data)
        except ValueError as e:
            raise StructuredDataError(f"Structured data is not valid JSON: {e}") from e
    else:
        tree = copy.deepcopy(data)

    if not isinstance(tree, dict):
        raise StructuredDataError("Structured data must be a JSON object")

    return sanitize_certification_dates(tree)


def parse_structured_data(data: Union[Dict[str, Any], str, bytes]) -> CVProcessedData:
    """Sanitize, then decode into the typed CV shape"""
    tree = sanitize_structured_data(data)
    try:
        return CVProcessedData.model_validate(tree)
    except PydanticValidationError as e:
        raise StructuredDataError(f"Structured data does not match the CV shape: {e}") from e


def sanitize_for_s3_metadata(text: str, max_length: int = 0) -> str:
    """
    Make text safe for object-store metadata headers.

    Line breaks become spaces, accents are stripped (á -> a, ñ -> n),
    remaining non-ASCII is dropped, whitespace runs are collapsed and the
    result is truncated to max_length when given.
    """
    if not text:
        return ""

    text = text.replace("\r", " ").replace("\n", " ")
    decomposed = unicodedata.normalize("NFKD", text)
    ascii_text = "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) and (ch.isspace() or 32 <= ord(ch) < 127)
    )
    result = " ".join(ascii_text.split())

    if max_length > 0 and len(result) > max_length:
        result = result[:max_length].rstrip()
    return result
