"""Topic path constants and NATS subject conversion.

Topics use `/` separators (e.g., `/economy/commands`), NATS subjects use `.`
(e.g., `economy.commands`).
"""


class Topics:
    """Topic paths used by the economy service and its hosts."""

    COMMANDS = "/economy/commands"
    RESULTS = "/economy/results"

    @classmethod
    def all_topics(cls) -> list[str]:
        """Return all static topic paths."""
        return [cls.COMMANDS, cls.RESULTS]


def to_nats_subject(topic: str) -> str:
    """Convert a topic path to a NATS subject.

    `/economy/commands` → `economy.commands`
    """
    return topic.lstrip("/").replace("/", ".")


def from_nats_subject(subject: str) -> str:
    """Convert a NATS subject back to a topic path.

    `economy.commands` → `/economy/commands`
    """
    return "/" + subject.replace(".", "/")
