"""Tests for the per-file descriptor registry."""

from __future__ import annotations

import pytest

from intlpass.models import (
    DescriptionRequiredError,
    DuplicateIdConflictError,
    MessageDescriptor,
    MissingDefaultMessageError,
    MissingIdError,
    SourceLocation,
)
from intlpass.registry import DescriptorRegistry


class TestRegister:
    """Validation order and storage."""

    def test_stores_in_registration_order(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("b.title"))
        registry.register(MessageDescriptor("a.title"))

        assert [m.id for m in registry.snapshot()] == ["b.title", "a.title"]
        assert len(registry) == 2
        assert "a.title" in registry

    def test_missing_id(self) -> None:
        registry = DescriptorRegistry()
        with pytest.raises(MissingIdError, match="require an `id`"):
            registry.register(MessageDescriptor(None, "desc", "Hello"))

    def test_empty_id_counts_as_missing(self) -> None:
        with pytest.raises(MissingIdError):
            DescriptorRegistry().register(MessageDescriptor(""))

    def test_missing_default_message_only_when_required(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("x"))
        with pytest.raises(MissingDefaultMessageError):
            registry.register(MessageDescriptor("y"), require_default_message=True)

    def test_description_enforcement(self) -> None:
        registry = DescriptorRegistry()
        with pytest.raises(DescriptionRequiredError, match="must have a `description`"):
            registry.register(MessageDescriptor("x"), require_description=True)
        registry.register(MessageDescriptor("x", "Page title"), require_description=True)
        assert registry.get("x").description == "Page title"

    def test_id_checked_before_description(self) -> None:
        with pytest.raises(MissingIdError):
            DescriptorRegistry().register(MessageDescriptor(None), require_description=True)

    def test_error_carries_location(self) -> None:
        loc = SourceLocation(12, 4)
        with pytest.raises(MissingIdError) as exc_info:
            DescriptorRegistry().register(MessageDescriptor(None), loc=loc)
        assert exc_info.value.loc == loc
        assert str(exc_info.value).startswith("12:4:")


class TestDuplicates:
    """Re-registering an id."""

    def test_identical_duplicate_is_accepted(self) -> None:
        registry = DescriptorRegistry()
        first = registry.register(MessageDescriptor("x", "d", "Hello"))
        second = registry.register(MessageDescriptor("x", "d", "Hello"))

        assert second is first
        assert len(registry) == 1

    def test_conflicting_description(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("x", "one"))
        with pytest.raises(DuplicateIdConflictError, match='Duplicate message id: "x"'):
            registry.register(MessageDescriptor("x", "two"))

    def test_conflicting_default_message(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("x", None, "Hello"))
        with pytest.raises(DuplicateIdConflictError):
            registry.register(MessageDescriptor("x", None, "Hi"))


class TestSnapshot:
    def test_snapshot_is_a_copy(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("x", None, "Hello"))

        snapshot = registry.snapshot()
        snapshot[0].default_message = "changed"

        assert registry.get("x").default_message == "Hello"

    def test_clear(self) -> None:
        registry = DescriptorRegistry()
        registry.register(MessageDescriptor("x"))
        registry.clear()
        assert len(registry) == 0
        assert registry.snapshot() == []
