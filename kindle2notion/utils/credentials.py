"""Storage of the Notion integration token.

The token is kept in its own file, base64-encoded and readable by the owner
only, rather than in the plain JSON configuration.
"""

import base64
import binascii
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH_FOR_PARTIAL_MASK = 8
VISIBLE_TOKEN_CHARS = 4


def encode_token(token: str) -> str:
    """Obfuscate a token with base64. This is not encryption."""
    if not token:
        return ""
    return base64.b64encode(token.encode()).decode()


def decode_token(encoded_token: str) -> str:
    """Decode a base64-obfuscated token.

    Returns:
        str: The decoded token or empty string if the value is not valid base64
    """
    if not encoded_token:
        return ""
    try:
        return base64.b64decode(encoded_token.encode(), validate=True).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.error("Error decoding stored token: %s", e)
        return ""


def save_token_to_file(token: str, file_path: Path) -> bool:
    """Write an encoded token to file_path with owner-only permissions.

    Args:
        token: The token to save
        file_path: Destination file

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(encode_token(token))
        if os.name == "posix":
            os.chmod(file_path, 0o600)
    except OSError as e:
        logger.error("Error saving token to %s: %s", file_path, e)
        return False

    logger.debug("Token saved to %s", file_path)
    return True


def load_token_from_file(file_path: Path) -> str:
    """Read and decode a token saved by save_token_to_file.

    Returns:
        str: The token, or empty string if the file is missing or unreadable
    """
    if not file_path.exists():
        logger.debug("Token file not found: %s", file_path)
        return ""

    try:
        encoded_token = file_path.read_text().strip()
    except OSError as e:
        logger.error("Error loading token from %s: %s", file_path, e)
        return ""

    return decode_token(encoded_token)


def mask_token(token: str) -> str:
    """Mask a token for display, keeping the first and last four characters."""
    if not token:
        return ""
    if len(token) <= MIN_TOKEN_LENGTH_FOR_PARTIAL_MASK:
        return "*" * len(token)
    hidden = len(token) - 2 * VISIBLE_TOKEN_CHARS
    return token[:VISIBLE_TOKEN_CHARS] + "*" * hidden + token[-VISIBLE_TOKEN_CHARS:]
