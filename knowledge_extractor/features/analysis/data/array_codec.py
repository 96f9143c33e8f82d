"""
Delimited-list codec for storage engines without an array column type.

    encode: strip each item, drop empties, join with ","
    decode: split on ",", strip each token, drop empties

An empty list encodes to "" and both "" and None decode to [].
Items containing the delimiter cannot round-trip; they split into
several tokens on decode.
"""
from typing import Any, Iterable, List, Optional

from knowledge_extractor.core.common.errors import DecodingError

DELIMITER = ","


def encode_list(items: Optional[Iterable[str]]) -> str:
    if items is None:
        return ""
    if isinstance(items, str):
        raise TypeError("expected an iterable of strings, got a single string")
    return DELIMITER.join(token for token in (str(item).strip() for item in items) if token)


def decode_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"stored list is not valid UTF-8: {e}") from e
    if not isinstance(value, str):
        raise DecodingError(f"cannot decode {type(value).__name__} into a string list")
    return [token for token in (part.strip() for part in value.split(DELIMITER)) if token]
