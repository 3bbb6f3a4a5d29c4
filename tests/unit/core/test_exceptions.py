"""Unit tests for the ethnet exception hierarchy.

Tests verify:
- issubclass relationships match the documented tree
- except clauses catch the expected subclasses
- all exceptions accept a message string
"""

import pytest

from ethnet.core.exceptions import (
    ConfigurationError,
    EmptyEndpointError,
    EnclaveNotFoundError,
    EndpointError,
    EthnetError,
    InvalidEndpointError,
    MetadataError,
    OrchestratorError,
    ServiceListingError,
    ServicesTimeoutError,
)


ALL_CONCRETE = (
    ConfigurationError,
    InvalidEndpointError,
    EmptyEndpointError,
    MetadataError,
    ServiceListingError,
    EnclaveNotFoundError,
    ServicesTimeoutError,
)

ALL_CLASSES = (EthnetError, EndpointError, OrchestratorError, *ALL_CONCRETE)


# =============================================================================
# Hierarchy Tests
# =============================================================================


class TestExceptionHierarchy:
    """Verify issubclass relationships match the documented tree."""

    @pytest.mark.parametrize("exc_cls", ALL_CONCRETE)
    def test_all_concrete_inherit_from_ethnet_error(self, exc_cls: type) -> None:
        assert issubclass(exc_cls, EthnetError)

    @pytest.mark.parametrize("exc_cls", [InvalidEndpointError, EmptyEndpointError])
    def test_endpoint_errors(self, exc_cls: type) -> None:
        assert issubclass(exc_cls, EndpointError)

    @pytest.mark.parametrize(
        "exc_cls", [ServiceListingError, EnclaveNotFoundError, ServicesTimeoutError]
    )
    def test_orchestrator_errors(self, exc_cls: type) -> None:
        assert issubclass(exc_cls, OrchestratorError)

    def test_empty_and_invalid_are_distinct(self) -> None:
        assert not issubclass(EmptyEndpointError, InvalidEndpointError)
        assert not issubclass(InvalidEndpointError, EmptyEndpointError)


class TestCatching:
    def test_base_catches_all(self) -> None:
        for exc_cls in ALL_CONCRETE:
            with pytest.raises(EthnetError):
                raise exc_cls("x")

    def test_endpoint_error_does_not_catch_orchestrator(self) -> None:
        with pytest.raises(OrchestratorError):
            try:
                raise ServiceListingError("failed to get services: boom")
            except EndpointError:
                pytest.fail("caught by the wrong branch")


class TestMessages:
    @pytest.mark.parametrize("exc_cls", ALL_CLASSES)
    def test_message_preserved(self, exc_cls: type) -> None:
        assert str(exc_cls("something went wrong")) == "something went wrong"
