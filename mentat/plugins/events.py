"""Event registry - binds plugin listeners to the chat client and tracks them."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from mentat.plugins.base import EventHandler

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """The subscription API of the chat client.

    ``discord.ext.commands.Bot`` satisfies this protocol.
    """

    def add_listener(self, func: EventHandler, name: str) -> None:
        ...

    def remove_listener(self, func: EventHandler, name: str) -> None:
        ...


@dataclass
class EventBinding:
    """One listener subscribed upstream on behalf of one plugin.

    ``handler`` is the exact object given to ``add_listener`` so the same
    object can be passed to ``remove_listener``.
    """

    plugin: str
    event: str
    handler: EventHandler = field(repr=False)

    @property
    def key(self) -> str:
        return f"{self.plugin}:{self.event}"


class EventRegistry:
    """Tracks (plugin, event) bindings against an external event source."""

    def __init__(self, source: EventSource):
        self.source = source
        self._bindings: Dict[str, EventBinding] = {}

    def subscribe(self, owner: str, event: str, handler: EventHandler) -> EventBinding:
        """Subscribe ``handler`` upstream under ``event`` for plugin ``owner``.

        A previous binding with the same key is unsubscribed first so only one
        listener per (plugin, event) pair is ever attached.
        """
        binding = EventBinding(plugin=owner, event=event, handler=handler)
        previous = self._bindings.get(binding.key)
        if previous is not None:
            logger.warning(f"Event binding '{binding.key}' already exists, replacing")
            self.source.remove_listener(previous.handler, previous.event)

        self.source.add_listener(handler, event)
        self._bindings[binding.key] = binding
        logger.debug(f"Subscribed listener: {binding.key}")
        return binding

    def unsubscribe_owned_by(self, owner: str) -> List[str]:
        """Detach and forget every binding of ``owner``. No-op if it has none.

        Returns:
            Keys of the removed bindings
        """
        removed = []
        for key, binding in list(self._bindings.items()):
            if binding.plugin != owner:
                continue
            self.source.remove_listener(binding.handler, binding.event)
            del self._bindings[key]
            removed.append(key)
        if removed:
            logger.debug(f"Unsubscribed {len(removed)} listener(s) of plugin '{owner}'")
        return removed

    def owned_by(self, owner: str) -> List[EventBinding]:
        return [b for b in self._bindings.values() if b.plugin == owner]

    def list(self) -> List[EventBinding]:
        return list(self._bindings.values())

    def count(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: str) -> bool:
        return key in self._bindings
