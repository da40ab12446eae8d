"""
Parsing of user supplied quiz ids.
"""
from typing import Optional

from .errors import MissingArgument, NotANumber


def parse_id(token: Optional[str]) -> int:
    """
    Turn a raw id token into an integer key.

    Existence is not checked here; that is the job of whatever fetches the
    quiz afterwards.

    Args:
        token: The argument typed after the command, or None

    Returns:
        The parsed id

    Raises:
        MissingArgument: If no token was given
        NotANumber: If the token is not an integer
    """
    if token is None or not token.strip():
        raise MissingArgument("id")
    try:
        return int(token.strip())
    except ValueError:
        raise NotANumber(token.strip()) from None
