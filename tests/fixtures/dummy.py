from typing import Any, Mapping, Optional

from mongodb_persistence import DataPage, IdentifiableModel, IdentifiableMongoDbPersistence, PagingParams


class Dummy(IdentifiableModel[str]):
    key: Optional[str] = None
    content: Optional[str] = None


class DummyMongoDbPersistence(IdentifiableMongoDbPersistence[Dummy, str]):
    """Stores `Dummy` records in the `dummies` collection and filters them by `key`."""

    def __init__(self, **kwargs: Any):
        super().__init__("dummies", Dummy, **kwargs)

    async def get_page_by_filter(
        self,
        correlation_id: Optional[str],
        filter: Optional[Mapping[str, Any]] = None,
        paging: Optional[PagingParams] = None,
        sort: Optional[Mapping[str, int]] = None,
        select: Optional[Mapping[str, Any]] = None,
    ) -> DataPage[Dummy]:
        criteria = {}
        key = (filter or {}).get("key")
        if key is not None:
            criteria["key"] = key
        return await super().get_page_by_filter(correlation_id, criteria, paging, sort, select)
