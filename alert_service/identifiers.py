"""External identifier generation and parsing.

Alerts carry two identifiers: a sequential internal key owned by the
database, and a random UUID that is the only identifier callers ever see.
"""

import re
import uuid
from typing import NewType

from alert_service.exceptions import ExternalIDParseError

ExternalID = NewType("ExternalID", uuid.UUID)

# Canonical 8-4-4-4-12 layout only; uuid.UUID() alone also accepts braces,
# urn prefixes and unhyphenated hex.
_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def generate_external_id() -> ExternalID:
    """Generate a new random external identifier.

    :returns: A version 4 UUID.
    """
    return ExternalID(uuid.uuid4())


def parse_external_id(text: str) -> ExternalID:
    """Parse the canonical textual form of an external identifier.

    :param text: Untrusted input, e.g. a URL path segment.
    :returns: The parsed identifier.
    :raises ExternalIDParseError: If the text is not a canonical UUID.
    """
    if not isinstance(text, str) or not _CANONICAL_UUID.fullmatch(text):
        raise ExternalIDParseError(text)
    return ExternalID(uuid.UUID(text))
