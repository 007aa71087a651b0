"""Cursor encoding and decoding for keyset pagination.

Cursors are opaque strings that encode the ordering-key value of the last
row a client has seen. The next query seeks past that value instead of
skipping an OFFSET.

The cursor format is:
1. JSON object with exactly one key, the entity's ordering-key column
2. Base64 URL-safe encoded, padding stripped, for use in query strings

Example cursor payload:
    {"drug_exposure_id":321}

Encoded: eyJkcnVnX2V4cG9zdXJlX2lkIjozMjF9

Decoding never raises. A token that cannot be decoded yields ``None`` and the
caller decides what to do with it (by default: restart at the first page).
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from typing import Any
from uuid import UUID

# Tokens longer than this are rejected before any decoding work happens.
MAX_CURSOR_LENGTH = 512

CursorState = dict[str, Any]


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        # Encoding
        token = CursorCodec.encode({"drug_exposure_id": 321})

        # Decoding
        state = CursorCodec.decode(token)
        print(state)  # {"drug_exposure_id": 321}

        CursorCodec.decode("not-base64!!")  # None
    """

    @staticmethod
    def encode(state: CursorState) -> str:
        """Encode cursor state to an opaque string.

        Args:
            state: Mapping with exactly one entry, ``{key_column: value}``

        Returns:
            URL-safe base64 string without padding

        Raises:
            ValueError: If state does not hold exactly one key
        """
        if len(state) != 1:
            msg = f"Cursor state must hold exactly one key, got {len(state)}"
            raise ValueError(msg)

        ((key, value),) = state.items()
        payload = {str(key): CursorCodec._serialize_value(value)}
        json_str = json.dumps(payload, separators=(",", ":"))
        return base64.urlsafe_b64encode(json_str.encode()).decode().rstrip("=")

    @staticmethod
    def decode(
        token: str | bytes | None,
        *,
        max_length: int = MAX_CURSOR_LENGTH,
    ) -> CursorState | None:
        """Decode a cursor string to cursor state.

        Accepts padded or unpadded tokens in either the standard or the
        URL-safe base64 alphabet.

        Args:
            token: Cursor string as received from the client
            max_length: Longest token that is considered at all

        Returns:
            ``{key_column: value}`` or None if the token is malformed
        """
        if isinstance(token, bytes):
            try:
                token = token.decode("ascii")
            except UnicodeDecodeError:
                return None
        if not isinstance(token, str) or not token or len(token) > max_length:
            return None

        normalized = token.strip().replace("-", "+").replace("_", "/")
        normalized += "=" * (-len(normalized) % 4)

        try:
            raw = base64.b64decode(normalized, validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError, RecursionError):
            return None

        if not isinstance(payload, dict) or len(payload) != 1:
            return None

        ((key, value),) = payload.items()
        if not key or isinstance(value, bool) or not isinstance(value, int | float | str):
            return None
        return {key: value}

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        """Serialize an ordering-key value to a JSON scalar.

        Handles datetime, date and UUID, which JSON has no native form for.
        """
        if isinstance(value, datetime | date):
            return value.isoformat()
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            msg = f"Unsupported cursor value type: {type(value).__name__}"
            raise ValueError(msg)
        return value

    @staticmethod
    def create_cursor(row: Any, key_column: str) -> str:
        """Create a cursor from a result row.

        Args:
            row: Mapping or attribute-bearing row holding the ordering key
            key_column: Name of the ordering-key column

        Returns:
            Encoded cursor string
        """
        if isinstance(row, dict) or hasattr(row, "keys"):
            value = row[key_column]
        else:
            value = getattr(row, key_column)
        return CursorCodec.encode({key_column: value})


__all__ = ["MAX_CURSOR_LENGTH", "CursorCodec", "CursorState"]
