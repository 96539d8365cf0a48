"""Factory functions for creating and parsing messages."""

from typing import Any

from pydantic import BaseModel

from vaultmarket.models.envelope import Envelope
from vaultmarket.models.messages import PAYLOAD_REGISTRY, CommandResult, MessageType
from vaultmarket.models.topics import Topics


def create_message(
    *,
    sender: str,
    topic: str,
    msg_type: MessageType,
    payload: BaseModel | dict[str, Any],
) -> Envelope:
    """Create an Envelope with a typed or dict payload.

    Args:
        sender: ID of the host or service sending this message.
        topic: The topic path (e.g., `/economy/commands`).
        msg_type: The message type.
        payload: A Pydantic model instance or a plain dict.

    Returns:
        A fully constructed Envelope.
    """
    if isinstance(payload, BaseModel):
        payload_dict = payload.model_dump(mode="json")
    else:
        payload_dict = payload

    return Envelope(
        **{"from": sender},
        topic=topic,
        type=msg_type,
        payload=payload_dict,
    )


def create_command(sender: str, msg_type: MessageType, payload: BaseModel | dict[str, Any]) -> Envelope:
    """Shortcut for a message on the command topic."""
    return create_message(sender=sender, topic=Topics.COMMANDS, msg_type=msg_type, payload=payload)


def create_result(sender: str, result: CommandResult) -> Envelope:
    """Shortcut for a CommandResult on the results topic."""
    return create_message(
        sender=sender,
        topic=Topics.RESULTS,
        msg_type=MessageType.COMMAND_RESULT,
        payload=result,
    )


def parse_message(data: str | bytes | dict[str, Any]) -> Envelope:
    """Parse raw data into an Envelope.

    Args:
        data: JSON string, bytes, or dict.

    Returns:
        A validated Envelope instance.

    Raises:
        ValidationError: If the data is not JSON or doesn't match the
            Envelope schema.
    """
    if isinstance(data, (str, bytes)):
        return Envelope.from_wire(data)
    return Envelope.model_validate(data)


def parse_payload(envelope: Envelope) -> BaseModel:
    """Parse an envelope's payload dict into its typed Pydantic model.

    Raises:
        ValueError: If the message type is unknown.
        ValidationError: If the payload doesn't match its model.
    """
    msg_type = MessageType(envelope.type)
    model_class = PAYLOAD_REGISTRY.get(msg_type)
    if model_class is None:
        raise ValueError(f"Unknown message type: {msg_type}")
    return model_class.model_validate(envelope.payload)
