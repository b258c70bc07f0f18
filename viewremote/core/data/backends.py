import json
from typing import Any, Protocol, runtime_checkable

from ..utils.exceptions import DecodeError


@runtime_checkable
class SerializationBackend(Protocol):
    """Protocol defining the interface for structured result backends"""

    def deserialize(self, data: str) -> Any:
        """Deserialize text back to an object"""
        ...


class JSONBackend:
    """JSON-based backend for structured view results with extended type support"""

    def _custom_decoder(self, obj: Any) -> Any:
        """Custom decoder for non-JSON-native types"""
        if isinstance(obj, dict) and '__type__' in obj:
            type_name = obj['__type__']
            if type_name == 'tuple':
                return tuple(self._decode_recursive(item) for item in obj['data'])
            elif type_name == 'set':
                return set(self._decode_recursive(item) for item in obj['data'])
            elif type_name == 'complex':
                return complex(obj['real'], obj['imag'])
            elif type_name == 'bytes':
                return obj['data'].encode('latin-1')
        return obj

    def deserialize(self, data: str) -> Any:
        """Deserialize a JSON document with extended type support"""
        try:
            obj = json.loads(data)
            return self._decode_recursive(obj)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError, ValueError) as e:
            raise DecodeError(f"JSON result is not valid: {e}", cause=e) from e

    def _decode_recursive(self, obj: Any) -> Any:
        """Recursively decode custom types"""
        if isinstance(obj, dict):
            # Type markers first, plain objects otherwise
            decoded = self._custom_decoder(obj)
            if decoded is not obj:
                return decoded
            return {k: self._decode_recursive(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._decode_recursive(item) for item in obj]
        return obj
