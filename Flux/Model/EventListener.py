from dataclasses import dataclass, field
import weakref
from typing import Any, Callable, Optional

"""A subscribed handler and a weak back-reference to the store it listens on."""
@dataclass(eq=False)
class EventListener:
    store_ref: "weakref.ref[Any]"
    handler: Callable[[], None] = field(repr=False)

    @classmethod
    def create(
        cls,
        store: Any,
        handler: Callable[[], None],
        on_store_released: Optional[Callable[["weakref.ref[Any]"], None]] = None,
    ) -> "EventListener":
        # Raises TypeError when `store` does not support weak references.
        return cls(store_ref=weakref.ref(store, on_store_released), handler=handler)

    def belongs_to(self, store: Any) -> bool:
        return self.store_ref() is store
