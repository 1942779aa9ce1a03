from typing import Any, Dict


class StoreError(Exception):
    """A read or write against the backing store failed; ``str(exc)`` is the reason."""


def row_to_dict(obj: Any) -> Dict[str, Any]:
    """Flatten an ORM row into the plain-dict shape the store adapters return."""
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}
