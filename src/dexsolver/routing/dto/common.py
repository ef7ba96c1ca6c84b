"""Field types shared by the provider wire models."""

from typing import Annotated, Any

from pydantic import BeforeValidator


def _hex_to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        raw = value[2:] if value.startswith(("0x", "0X")) else value
        return bytes.fromhex(raw)
    return value


# "0x..." hex strings on the wire, raw bytes in Python
HexBytes = Annotated[bytes, BeforeValidator(_hex_to_bytes)]
