from mongodb_persistence.data import DataPage, IdentifiableModel, IdGenerator, PagingParams, is_empty_id
from tests.fixtures.dummy import Dummy


def test_paging_skip():
    assert PagingParams().get_skip(-1) == -1
    assert PagingParams(skip=5).get_skip(-1) == 5
    assert PagingParams(skip=-3).get_skip(0) == 0


def test_paging_take_is_clamped():
    assert PagingParams().get_take(100) == 100
    assert PagingParams(take=10).get_take(100) == 10
    assert PagingParams(take=1000).get_take(100) == 100
    assert PagingParams(take=-1).get_take(100) == 0


def test_paging_total():
    assert PagingParams().has_total() is False
    assert PagingParams(total=True).has_total() is True


def test_data_page_defaults():
    page = DataPage[Dummy]()
    assert page.data == []
    assert page.total is None

    page = DataPage[Dummy](data=[Dummy(id="1", key="a")], total=1)
    assert page.data[0].key == "a"


def test_id_generator():
    long_id = IdGenerator.next_long()
    short_id = IdGenerator.next_short()

    assert len(long_id) == 32
    assert long_id != IdGenerator.next_long()
    assert len(short_id) == 9
    assert short_id.isdigit()


def test_is_empty_id():
    assert is_empty_id(None)
    assert is_empty_id("")
    assert not is_empty_id("1")
    assert not is_empty_id(0)


def test_identifiable_model_ignores_unknown_fields():
    dummy = Dummy.model_validate({"id": "1", "key": "a", "extra": "dropped"})
    assert dummy.id == "1"
    assert not hasattr(dummy, "extra")


class NumberedDummy(IdentifiableModel[int]):
    key: str


def test_next_integer_fits_int64():
    key = IdGenerator.next_integer()

    assert isinstance(key, int)
    assert 0 <= key < 2 ** 63


def test_generator_follows_model_key_type():
    assert IdGenerator.for_model(Dummy) is IdGenerator.next_long
    assert IdGenerator.for_model(NumberedDummy) is IdGenerator.next_integer
    assert IdGenerator.for_model(dict) is IdGenerator.next_long
