# traitsearch/errors.py
# Purpose: Client-facing search errors. Route handlers map every SearchError to a 400
# with {"error": <message>}; anything else becomes a generic 500.

from fastapi import status


class SearchError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingParameterError(SearchError):
    """No usable query parameter was supplied."""


class ValidationError(SearchError):
    """A query parameter is shorter or longer than the allowed bounds."""


class InvalidLimitError(SearchError):
    """`limit` is not a positive integer within the cap (reject policy only)."""


class UnknownFieldError(SearchError):
    """A field-specific search named a field with no configured weight."""
