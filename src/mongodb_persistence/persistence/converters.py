"""
# Document Converters

Strategies that translate between the **public** shape callers work with and the
**stored** document shape. The persistence components never touch field layout
themselves; they hand every value to their converter.

The one translation every default converter performs is the primary key rename:
callers see `id`, MongoDB stores `_id`.

Custom converters (encryption, legacy field names, denormalized copies) implement
the methods of `DocumentConverter` and are passed to the persistence
constructor:

```python
class EncryptingConverter(ModelDocumentConverter[Secret]):
    def from_public(self, item):
        document = super().from_public(item)
        document["payload"] = fernet.encrypt(document["payload"].encode())
        return document

persistence = SecretsPersistence(converter=EncryptingConverter(Secret))
```
"""

from typing import Any, Dict, Generic, Mapping, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

ID_FIELD = "id"
MONGO_ID_FIELD = "_id"


class DocumentConverter(Protocol[T]):
    """Translates values between the public shape `T` and stored documents."""

    def to_public(self, document: Optional[Mapping[str, Any]]) -> Optional[T]:
        ...

    def to_public_partial(self, document: Optional[Mapping[str, Any]]) -> Optional[T]:
        ...

    def from_public(self, item: Optional[T]) -> Optional[Dict[str, Any]]:
        ...

    def from_public_partial(self, data: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        ...


def _strip_id(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key != ID_FIELD}


class DictDocumentConverter:
    """Keeps values as plain dictionaries, renaming `_id` to `id` on the way out."""

    def to_public(self, document: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        if document is None:
            return None
        public = dict(document)
        if MONGO_ID_FIELD in public:
            public[ID_FIELD] = public.pop(MONGO_ID_FIELD)
        return public

    def to_public_partial(self, document: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        return self.to_public(document)

    def from_public(self, item: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        if item is None:
            return None
        return _strip_id(item)

    def from_public_partial(self, data: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        return self.from_public(data)


class ModelDocumentConverter(Generic[M]):
    """
    Converts stored documents into instances of a Pydantic model and back.

    Attributes:
        model (`Type[M]`): Model class used to validate documents read from the
            collection. Fields of the document unknown to the model are dropped
            by validation.
    """

    def __init__(self, model: Type[M]):
        self.model = model

    def to_public(self, document: Optional[Mapping[str, Any]]) -> Optional[M]:
        if document is None:
            return None
        if isinstance(document, self.model):
            return document
        data = dict(document)
        if MONGO_ID_FIELD in data:
            data[ID_FIELD] = data.pop(MONGO_ID_FIELD)
        return self.model.model_validate(data)

    def to_public_partial(self, document: Optional[Mapping[str, Any]]) -> Optional[M]:
        """Build a model from a projected document without validating it; `model_fields_set` lists the returned fields."""
        if document is None:
            return None
        if isinstance(document, self.model):
            return document
        data = dict(document)
        if MONGO_ID_FIELD in data:
            data[ID_FIELD] = data.pop(MONGO_ID_FIELD)
        return self.model.model_construct(**data)

    def from_public(self, item: Optional[Any]) -> Optional[Dict[str, Any]]:
        if item is None:
            return None
        if isinstance(item, BaseModel):
            return item.model_dump(exclude={ID_FIELD})
        return _strip_id(item)

    def from_public_partial(self, data: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        if data is None:
            return None
        if isinstance(data, BaseModel):
            return data.model_dump(exclude={ID_FIELD}, exclude_unset=True)
        return _strip_id(data)
