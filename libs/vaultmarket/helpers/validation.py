"""Envelope checks run by the economy service before it parses a payload."""

from pydantic import BaseModel, ValidationError

from vaultmarket.models.envelope import Envelope
from vaultmarket.models.messages import PAYLOAD_REGISTRY, MessageType
from vaultmarket.models.topics import Topics


def expected_topic(msg_type: MessageType) -> str:
    """Results travel on the results topic, every command on the commands topic."""
    if msg_type == MessageType.COMMAND_RESULT:
        return Topics.RESULTS
    return Topics.COMMANDS


def _payload_errors(model_class: type[BaseModel], payload: dict) -> list[str]:
    try:
        model_class.model_validate(payload)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            problems.append(f"payload.{loc}: {err['msg']}" if loc else f"payload: {err['msg']}")
        return problems
    return []


def validate_message(envelope: Envelope) -> list[str]:
    """Validate an envelope for correctness.

    Returns a list of error strings. Empty list means valid.
    """
    errors: list[str] = []
    if not envelope.sender.strip():
        errors.append("'from' field must not be empty")

    try:
        msg_type = MessageType(envelope.type)
    except ValueError:
        return errors + [f"Unknown message type: {envelope.type}"]

    topic = expected_topic(msg_type)
    if envelope.topic != topic:
        errors.append(f"{msg_type} belongs on {topic}, not '{envelope.topic}'")

    model_class = PAYLOAD_REGISTRY.get(msg_type)
    if model_class is None:
        return errors + [f"No payload schema registered for type: {msg_type}"]
    return errors + _payload_errors(model_class, envelope.payload)
