from __future__ import annotations
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Calendrical(Protocol):
    """Anything that can answer a rule query, such as a field or a value type."""
    def get(self, rule: Any) -> Optional[Any]: ...


@runtime_checkable
class Contributor(Protocol):
    """A calendrical that can hand its state to the engine directly."""
    def contribution(self) -> Any: ...
