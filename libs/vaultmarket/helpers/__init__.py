from vaultmarket.helpers.factory import (
    create_command,
    create_message,
    create_result,
    parse_message,
    parse_payload,
)
from vaultmarket.helpers.validation import expected_topic, validate_message

__all__ = [
    "create_command",
    "create_message",
    "create_result",
    "expected_topic",
    "parse_message",
    "parse_payload",
    "validate_message",
]
