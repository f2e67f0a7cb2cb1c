"""JSON body → model deserialization.

Any pydantic-validatable shape is accepted: a model class, ``list[Model]``,
``dict[str, Any]``. Type adapters are built once per shape.
"""

from functools import lru_cache
from typing import Any, TypeVar, get_origin

from pydantic import TypeAdapter, ValidationError

from shared.exceptions import DeserializationError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def shape_name(shape: Any) -> str:
    if get_origin(shape) is not None:
        return repr(shape)
    return getattr(shape, "__name__", None) or repr(shape)


def parse(body: bytes, shape: type[T]) -> T:
    """Validate a raw JSON body against *shape*.

    Raises DeserializationError when the body is not JSON or does not match.
    """
    try:
        return _adapter(shape).validate_json(body)
    except ValidationError as exc:
        raise DeserializationError(
            shape_name(shape),
            [
                {
                    "loc": ".".join(str(part) for part in err["loc"]) or "(root)",
                    "message": err["msg"],
                    "type": err["type"],
                }
                for err in exc.errors()
            ],
        ) from exc
