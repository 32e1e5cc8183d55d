# core/utils.py

from typing import Any, Mapping, Optional


def get_field(obj: Any, name: str, alias: Optional[str] = None) -> Any:
    """
    Read a field from either a pydantic model or a raw stored document.

    Models are read by attribute name; mappings by the stored (camelCase)
    alias first, then the attribute name. Anything else yields None.
    """
    if obj is None:
        return None

    if isinstance(obj, Mapping):
        if alias and alias in obj:
            return obj.get(alias)
        return obj.get(name)

    return getattr(obj, name, None)


def sanitize_document(data: Any) -> Any:
    """
    Sanitize a document before persistence:
    - Strip string whitespace (recursively through dicts and lists)
    - Preserve None, booleans and numbers
    - Strings stay strings (phone numbers and counts are stored as text)
    """
    if isinstance(data, str):
        return data.strip()

    if isinstance(data, dict):
        return {k: sanitize_document(v) for k, v in data.items()}

    if isinstance(data, list):
        return [sanitize_document(v) for v in data]

    return data
