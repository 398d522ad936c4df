"""
# Data Primitives

Value types shared by every identifiable persistence:

- **`IdentifiableModel[K]`**: base Pydantic model for records with a unique `id`
  of key type `K` (usually `str`, sometimes `int`).
- **`PagingParams`**: skip/take/total request for paged queries.
- **`DataPage[T]`**: one page of results plus the optional total count.
- **`IdGenerator`**: unique key generation for records created without an id.

## Usage

```python
class Dummy(IdentifiableModel[str]):
    key: str
    content: Optional[str] = None

paging = PagingParams(skip=0, take=10, total=True)
page: DataPage[Dummy] = await persistence.get_page_by_filter("123", {}, paging)
print(page.total, [item.id for item in page.data])
```
"""

import random
import uuid
from typing import Any, Callable, Generic, List, Optional, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, Field

K = TypeVar("K")
T = TypeVar("T")


class IdentifiableModel(BaseModel, Generic[K]):
    """
    Base model for records identified by a unique `id`.

    The `id` is optional so that a record can be handed to `create()` or `set()`
    before it has a key; the persistence assigns one in that case.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[K] = None


class PagingParams(BaseModel):
    """
    Paging request for `get_page_by_filter`.

    Attributes:
        skip (`Optional[int]`): Number of items to skip. `None` means "not set".
        take (`Optional[int]`): Number of items to return. `None` means "use the
            configured maximum page size".
        total (`bool`): Whether the page must carry the total number of matches.
    """

    skip: Optional[int] = Field(default=None, description="Number of items to skip.")
    take: Optional[int] = Field(default=None, description="Number of items to return.")
    total: bool = Field(default=False, description="Return the total count of matches.")

    def get_skip(self, min_skip: int) -> int:
        """Return `skip`, or `min_skip` when it is not set or smaller."""
        if self.skip is None or self.skip < min_skip:
            return min_skip
        return self.skip

    def get_take(self, max_take: int) -> int:
        """Return `take` clamped to `[0, max_take]`; `max_take` when not set."""
        if self.take is None:
            return max_take
        if self.take < 0:
            return 0
        if self.take > max_take:
            return max_take
        return self.take

    def has_total(self) -> bool:
        return self.total


class DataPage(BaseModel, Generic[T]):
    """
    A page of results.

    Attributes:
        data (`List[T]`): Items of the page in query order.
        total (`Optional[int]`): Total number of matches; only set when the
            paging request asked for it.
    """

    data: List[T] = Field(default_factory=list)
    total: Optional[int] = None


class IdGenerator:
    """Generates unique keys for records created without an id."""

    @staticmethod
    def next_long() -> str:
        """Return a 32 character hexadecimal key (uuid4 without dashes)."""
        return uuid.uuid4().hex

    @staticmethod
    def next_short() -> str:
        """Return a 9 digit numeric key. Not globally unique, suitable for small sets."""
        return str(random.randint(100_000_000, 999_999_999))

    @staticmethod
    def next_integer() -> int:
        """Return a random positive 63 bit key; fits a BSON int64."""
        return uuid.uuid4().int >> 65

    @staticmethod
    def for_model(model: Any) -> Callable[[], Any]:
        """
        Pick the generator matching the `id` annotation of `model`.

        `int` keys get `next_integer`; every other key type gets `next_long`.
        """
        field = getattr(model, "model_fields", {}).get("id")
        if field is None:
            return IdGenerator.next_long

        key_types = set(get_args(field.annotation)) or {field.annotation}
        key_types.discard(type(None))
        if key_types == {int}:
            return IdGenerator.next_integer
        return IdGenerator.next_long


def is_empty_id(value: Any) -> bool:
    """True when `value` cannot be used as a primary key (`None` or empty string)."""
    return value is None or value == ""
