"""
# Identifiable MongoDB Persistence

Generic CRUD, paging, sorting and filtering over records with a unique `id`.

In basic scenarios a subclass only composes a MongoDB filter from its own
filter arguments and calls `get_page_by_filter`, `get_list_by_filter` or
`delete_by_filter`; every other operation works out of the box. Bespoke queries
go through the `collection` property.

## Identity

Callers see the key as `id`; MongoDB stores it as `_id`. `create()` and `set()`
reuse a non-empty `item.id` and otherwise generate one, so `set()` with the same
id overwrites the record while `create()` with an existing id raises the
driver's `DuplicateKeyError`.

## Operations

| Operation | Driver call | Result |
|---|---|---|
| `get_page_by_filter` | `find` + `skip`/`limit`/`sort`, optional `count_documents` | `DataPage[T]` |
| `get_list_by_filter` | `find` + `sort` | `List[T]` |
| `get_list_by_ids` | `find({"_id": {"$in": ids}})` | `List[T]` |
| `get_one_by_id` | `find_one` | `Optional[T]` |
| `get_one_random` | `count_documents` + `find().skip(n).limit(1)` | `Optional[T]` |
| `create` | `insert_one` | `Optional[T]` |
| `set` | `find_one_and_replace(upsert=True)` | `Optional[T]` |
| `update` | `find_one_and_replace` | `Optional[T]` |
| `update_partially` | `find_one_and_update({"$set": ...})` | `Optional[T]` |
| `delete_by_id` | `find_one_and_delete` | `Optional[T]` |
| `delete_by_filter` / `delete_by_ids` | `delete_many` | `None` |

## Example

```python
class DummyMongoDbPersistence(IdentifiableMongoDbPersistence[Dummy, str]):
    def __init__(self):
        super().__init__("dummies", Dummy)

    async def get_page_by_filter(self, correlation_id, filter=None, paging=None, sort=None, select=None):
        criteria = {}
        if filter and filter.get("key") is not None:
            criteria["key"] = filter["key"]
        return await super().get_page_by_filter(correlation_id, criteria, paging, sort, select)
```
"""

import random
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pymongo import ReturnDocument

from mongodb_persistence.config import ConfigParams
from mongodb_persistence.connect.resolver import MongoDbConnectionResolver
from mongodb_persistence.data import DataPage, IdentifiableModel, IdGenerator, PagingParams, is_empty_id
from mongodb_persistence.persistence.base import MongoDbPersistence
from mongodb_persistence.persistence.converters import MONGO_ID_FIELD, DocumentConverter

T = TypeVar("T", bound=IdentifiableModel)
K = TypeVar("K")

SortSpec = Union[Mapping[str, int], Sequence[Tuple[str, int]]]


class IdentifiableMongoDbPersistence(MongoDbPersistence, Generic[T, K]):
    """
    Persistence with CRUD and paging operations over identifiable records.

    Args:
        collection (`str`): Name of the MongoDB collection. Required.
        model (`Type[T]`): Model class of the records. Required.
        connection_resolver (`Optional[MongoDbConnectionResolver]`): Resolver to use
            instead of a freshly created one.
        converter (`Optional[DocumentConverter]`): Shape conversion strategy;
            defaults to `ModelDocumentConverter(model)`.
        id_generator (`Callable[[], K]`): Produces keys for records created without
            an id. Defaults to `IdGenerator.for_model(model)`: integer keys for
            `int` ids, 32 character hex strings otherwise.

    Raises:
        `ValueError`: If `collection` or `model` is missing.
    """

    def __init__(
        self,
        collection: str,
        model: Type[T],
        connection_resolver: Optional[MongoDbConnectionResolver] = None,
        converter: Optional[DocumentConverter] = None,
        id_generator: Optional[Callable[[], Any]] = None,
        logger: Optional[Any] = None,
    ):
        if collection is None:
            raise ValueError("Collection name could not be null")
        if model is None:
            raise ValueError("Model could not be null")

        super().__init__(collection, model, connection_resolver, converter, logger)
        self._max_page_size = 100
        self._id_generator = id_generator or IdGenerator.for_model(model)

    def configure(self, config: Mapping[str, Any]) -> None:
        super().configure(config)
        self._max_page_size = ConfigParams(config).get_as_integer_with_default(
            "options.max_page_size", self._max_page_size
        )

    @property
    def max_page_size(self) -> int:
        return self._max_page_size

    def _find(self, filter: Optional[Mapping[str, Any]], sort: Optional[SortSpec], select: Optional[Mapping[str, Any]]):
        cursor = self.collection.find(filter or {}, projection=dict(select) if select else None)
        if sort:
            cursor = cursor.sort(list(sort.items()) if isinstance(sort, Mapping) else list(sort))
        return cursor

    def _assign_id(self, item: T) -> Any:
        return item.id if not is_empty_id(item.id) else self._id_generator()

    def _convert_documents(self, documents: List[Dict[str, Any]], select: Optional[Mapping[str, Any]]) -> List[T]:
        # Projected documents may lack required fields and are not validated.
        convert = self._convert_to_public_partial if select else self._convert_to_public
        return [convert(document) for document in documents]

    async def get_page_by_filter(
        self,
        correlation_id: Optional[str],
        filter: Optional[Mapping[str, Any]] = None,
        paging: Optional[PagingParams] = None,
        sort: Optional[SortSpec] = None,
        select: Optional[Mapping[str, Any]] = None,
    ) -> DataPage[T]:
        """
        Get a page of records matching `filter`.

        Subclasses usually wrap this with a method that turns their own filter
        arguments into a MongoDB filter.

        Args:
            correlation_id (`Optional[str]`): Id used to trace the call in logs.
            filter (`Optional[Mapping]`): MongoDB filter. `None` matches everything.
            paging (`Optional[PagingParams]`): Skip/take/total. `take` is capped by
                `options.max_page_size`; an unset `skip` sends no skip clause.
            sort (`Optional[SortSpec]`): `{field: 1 | -1}` in priority order.
            select (`Optional[Mapping]`): Projection. Projected items are built
                without validation, so required fields may be missing.

        Returns:
            `DataPage[T]`: The page; `total` is set only when `paging.total` is true.
                The count query runs after the page query has succeeded.
        """
        paging = paging or PagingParams()
        skip = paging.get_skip(-1)
        take = paging.get_take(self._max_page_size)

        cursor = self._find(filter, sort, select)
        if skip >= 0:
            cursor = cursor.skip(skip)
        cursor = cursor.limit(take)

        documents = await cursor.to_list(length=None)
        self._logger.trace(
            "Retrieved %d from %s", len(documents), self._collection_name, correlation_id=correlation_id
        )
        items = self._convert_documents(documents, select)

        if paging.has_total():
            count = await self.collection.count_documents(filter or {})
            return DataPage(data=items, total=count)

        return DataPage(data=items)

    async def get_list_by_filter(
        self,
        correlation_id: Optional[str],
        filter: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        select: Optional[Mapping[str, Any]] = None,
    ) -> List[T]:
        """Get every record matching `filter`, sorted and projected; no paging is applied."""
        documents = await self._find(filter, sort, select).to_list(length=None)
        self._logger.trace(
            "Retrieved %d from %s", len(documents), self._collection_name, correlation_id=correlation_id
        )
        return self._convert_documents(documents, select)

    async def get_list_by_ids(self, correlation_id: Optional[str], ids: Iterable[K]) -> List[T]:
        filter = {MONGO_ID_FIELD: {"$in": list(ids)}}
        return await self.get_list_by_filter(correlation_id, filter)

    async def get_one_by_id(self, correlation_id: Optional[str], id: K) -> Optional[T]:
        document = await self.collection.find_one({MONGO_ID_FIELD: id})
        self._logger.trace(
            "Retrieved from %s by id = %s", self._collection_name, id, correlation_id=correlation_id
        )
        return self._convert_to_public(document)

    async def get_one_random(
        self, correlation_id: Optional[str], filter: Optional[Mapping[str, Any]] = None
    ) -> Optional[T]:
        """
        Get a uniformly random record among those matching `filter`.

        Returns:
            `Optional[T]`: A record, or `None` when nothing matches.
        """
        filter = filter or {}
        count = await self.collection.count_documents(filter)
        position = random.randint(0, count - 1) if count > 0 else 0

        documents = await self.collection.find(filter).skip(position).limit(1).to_list(length=1)
        document = documents[0] if documents else None
        return self._convert_to_public(document)

    async def create(self, correlation_id: Optional[str], item: Optional[T]) -> Optional[T]:
        """
        Insert a new record.

        The record keeps its `id` when one is set; otherwise a new key is generated.

        Returns:
            `Optional[T]`: The created record, `None` when `item` is `None`.

        Raises:
            `pymongo.errors.DuplicateKeyError`: A record with the same id exists.
            `pydantic.ValidationError`: The record, with its key, does not fit the
                model. Nothing is written.
        """
        if item is None:
            return None

        document = {MONGO_ID_FIELD: self._assign_id(item)}
        document.update(self._convert_from_public(item))
        # Must validate before insert_one.
        created = self._convert_to_public(document)

        await self.collection.insert_one(document)
        self._logger.trace(
            "Created in %s with id = %s", self._collection_name, document[MONGO_ID_FIELD],
            correlation_id=correlation_id,
        )
        return created

    async def set(self, correlation_id: Optional[str], item: Optional[T]) -> Optional[T]:
        """
        Create the record, or replace it when a record with the same id exists.

        Returns:
            `Optional[T]`: The stored record, `None` when `item` is `None`.

        Raises:
            `pydantic.ValidationError`: The record does not fit the model. Nothing is written.
        """
        if item is None:
            return None

        id = self._assign_id(item)
        document = {MONGO_ID_FIELD: id}
        document.update(self._convert_from_public(item))
        self._convert_to_public(document)

        result = await self.collection.find_one_and_replace(
            {MONGO_ID_FIELD: id}, document, upsert=True, return_document=ReturnDocument.AFTER
        )
        self._logger.trace("Set in %s with id = %s", self._collection_name, id, correlation_id=correlation_id)
        return self._convert_to_public(result)

    async def update(self, correlation_id: Optional[str], item: Optional[T]) -> Optional[T]:
        """
        Replace every field of an existing record except its id.

        Returns:
            `Optional[T]`: The updated record; `None` when `item` or its id is
                missing, or when no record has that id.
        """
        if item is None or is_empty_id(item.id):
            return None

        document = self._convert_from_public(item)
        result = await self.collection.find_one_and_replace(
            {MONGO_ID_FIELD: item.id}, document, return_document=ReturnDocument.AFTER
        )
        self._logger.trace(
            "Updated in %s with id = %s", self._collection_name, item.id, correlation_id=correlation_id
        )
        return self._convert_to_public(result)

    async def update_partially(
        self, correlation_id: Optional[str], id: Optional[K], data: Optional[Mapping[str, Any]]
    ) -> Optional[T]:
        """
        Set only the given fields of an existing record.

        Args:
            id (`Optional[K]`): Id of the record.
            data (`Optional[Mapping]`): Fields to set; other fields are left untouched.

        Returns:
            `Optional[T]`: The updated record; `None` when `id` or `data` is missing,
                or when no record has that id.
        """
        if is_empty_id(id) or not data:
            return None

        partial = self._convert_from_public_partial(data)
        result = await self.collection.find_one_and_update(
            {MONGO_ID_FIELD: id}, {"$set": partial}, return_document=ReturnDocument.AFTER
        )
        self._logger.trace(
            "Updated partially in %s with id = %s", self._collection_name, id, correlation_id=correlation_id
        )
        return self._convert_to_public(result)

    async def delete_by_id(self, correlation_id: Optional[str], id: K) -> Optional[T]:
        """Delete a record and return it as it was, or `None` when it does not exist."""
        document = await self.collection.find_one_and_delete({MONGO_ID_FIELD: id})
        self._logger.trace("Deleted from %s with id = %s", self._collection_name, id, correlation_id=correlation_id)
        return self._convert_to_public(document)

    async def delete_by_filter(self, correlation_id: Optional[str], filter: Optional[Mapping[str, Any]] = None) -> None:
        result = await self.collection.delete_many(filter or {})
        self._logger.trace(
            "Deleted %d items from %s", result.deleted_count, self._collection_name, correlation_id=correlation_id
        )

    async def delete_by_ids(self, correlation_id: Optional[str], ids: Iterable[K]) -> None:
        filter = {MONGO_ID_FIELD: {"$in": list(ids)}}
        await self.delete_by_filter(correlation_id, filter)
