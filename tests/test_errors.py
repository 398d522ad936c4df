from mongodb_persistence.errors import (
    CONNECT_FAILED,
    NO_HOST,
    ApplicationException,
    ConfigException,
    ConnectionException,
    ReferenceException,
)


def test_exception_carries_code_and_correlation_id():
    error = ConfigException("123", NO_HOST, "Connection host is not set")

    assert isinstance(error, ApplicationException)
    assert error.code == NO_HOST
    assert error.correlation_id == "123"
    assert error.message == "Connection host is not set"
    assert str(error) == "NO_HOST: Connection host is not set"


def test_exception_chains_cause():
    cause = OSError("connection refused")
    error = ConnectionException("123", CONNECT_FAILED, "Connection to mongodb failed", cause=cause)

    assert error.cause is cause
    assert error.__cause__ is cause
    assert "caused by" in str(error)


def test_fluent_helpers():
    error = ReferenceException(None, "NO_DISCOVERY").with_details("key", "mongo").with_cause(KeyError("mongo"))

    assert error.message == "NO_DISCOVERY"
    assert error.details == {"key": "mongo"}
    assert isinstance(error.cause, KeyError)
