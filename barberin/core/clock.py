from datetime import datetime, timezone


def utcnow() -> datetime:
    """Agora em UTC, sempre com tzinfo (o banco recusa datetime ingênuo)."""
    return datetime.now(timezone.utc)
