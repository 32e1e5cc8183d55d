# models/base.py

from pydantic import BaseModel, ConfigDict


class DocumentModel(BaseModel):
    """
    Base for models that mirror a stored document.

    Attributes are snake_case; the stored layout is camelCase via aliases.
    Either spelling is accepted on input.
    """
    model_config = ConfigDict(populate_by_name=True)

    def to_document(self, **kwargs) -> dict:
        """Serialize to the stored (camelCase, JSON-safe) layout."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)
