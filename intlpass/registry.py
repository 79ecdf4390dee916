"""Per-file store of message descriptors."""

from __future__ import annotations

import logging

from intlpass.models import (
    DescriptionRequiredError,
    DuplicateIdConflictError,
    MessageDescriptor,
    MissingDefaultMessageError,
    MissingIdError,
    SourceLocation,
)

logger = logging.getLogger(__name__)


class DescriptorRegistry:
    """
    Descriptors keyed by id, in registration order.

    Registering the same id twice is accepted only when description and
    defaultMessage match the stored entry.
    """

    def __init__(self) -> None:
        self._messages: dict[str, MessageDescriptor] = {}

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def get(self, message_id: str) -> MessageDescriptor | None:
        return self._messages.get(message_id)

    def register(
        self,
        descriptor: MessageDescriptor,
        *,
        require_description: bool = False,
        require_default_message: bool = False,
        loc: SourceLocation | None = None,
    ) -> MessageDescriptor:
        """
        Validate and store a descriptor.

        Args:
            descriptor: The descriptor to store.
            require_description: Fail when the description is missing.
            require_default_message: Fail when defaultMessage is missing.
            loc: Source location attached to any error raised.

        Returns:
            The stored descriptor (the existing one on an identical re-register).
        """
        if not descriptor.id:
            raise MissingIdError("Message Descriptors require an `id` attribute.", loc)

        if require_default_message and not descriptor.default_message:
            raise MissingDefaultMessageError(
                f"Message Descriptor {descriptor.id!r} requires a `defaultMessage`.", loc
            )

        if require_description and not descriptor.description:
            raise DescriptionRequiredError(
                f"Message {descriptor.id!r} must have a `description`.", loc
            )

        existing = self._messages.get(descriptor.id)
        if existing is not None:
            if (
                existing.description != descriptor.description
                or existing.default_message != descriptor.default_message
            ):
                raise DuplicateIdConflictError(
                    f'Duplicate message id: "{descriptor.id}", but the `description` '
                    "and/or `defaultMessage` are different.",
                    loc,
                )
            return existing

        stored = MessageDescriptor(
            id=descriptor.id,
            description=descriptor.description,
            default_message=descriptor.default_message,
        )
        self._messages[descriptor.id] = stored
        logger.debug("Registered message %r", descriptor.id)
        return stored

    def snapshot(self) -> list[MessageDescriptor]:
        """Copies of all descriptors in registration order."""
        return [
            MessageDescriptor(m.id, m.description, m.default_message)
            for m in self._messages.values()
        ]

    def clear(self) -> None:
        self._messages.clear()
