from typing import Protocol


class SessionStorePort(Protocol):
    """String key/value storage scoped to one browsing session."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...
