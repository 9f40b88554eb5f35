"""In-memory session store adapter.

Implements SessionStorePort for a single process/session, the server-side
counterpart of a browser tab's sessionStorage.
"""


class InMemorySessionStore:
    """Key/value storage that lives as long as the process."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values)

    def clear(self) -> None:
        """Clear all entries - useful for testing."""
        self._values.clear()
