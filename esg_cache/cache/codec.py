"""
Payload codecs.

Converts typed payloads to JSON-compatible values and back using
pydantic type adapters.
"""

import json
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from esg_cache.exceptions import SerializationError

T = TypeVar("T")


class PayloadCodec(Generic[T]):
    """Serialize/deserialize capability for one payload type."""

    def __init__(self, payload_type: Any):
        """
        Initialize codec.

        Args:
            payload_type: Type to validate against (model, list[Model], dict, ...)
        """
        self._adapter: TypeAdapter[T] = TypeAdapter(payload_type)

    def encode(self, value: T) -> Any:
        """
        Encode payload to a JSON-compatible value.

        The value is validated first so that only payloads this codec
        can decode again are ever written.

        Raises:
            SerializationError: If the value does not match the payload
                type or cannot be serialized
        """
        try:
            validated = self._adapter.validate_python(value)
            return self._adapter.dump_python(validated, mode="json", by_alias=True)
        except (ValidationError, TypeError, ValueError) as e:
            raise SerializationError(f"Payload encode failed: {e}") from e

    def decode(self, raw: Any) -> T:
        """
        Decode a JSON-compatible value into the payload type.

        Raises:
            SerializationError: If the value does not validate
        """
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            raise SerializationError(f"Payload decode failed: {e}") from e

    @staticmethod
    def payload_size(raw: Any) -> int:
        """
        Get serialized size of an encoded payload.

        Args:
            raw: JSON-compatible value

        Returns:
            UTF-8 byte length of its compact JSON text
        """
        try:
            text = json.dumps(raw, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Payload size calculation failed: {e}") from e
        return len(text.encode("utf-8"))


# Pass-through codec for plain JSON values
JSON_CODEC: PayloadCodec[Any] = PayloadCodec(Any)
