import asyncio
import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from textrelay.core.transport.protocol import Protocol


@dataclass
class ServerState:
    """
    Shared runtime state for a RelayServer.

    This object is mutated by:
    - Protocol: registers/unregisters active connections, spawns reader tasks
    - RelayServer.shutdown(): closes the registered connections and waits on the tasks
    """
    connections: dict[int, "Protocol"] = field(default_factory=dict)
    """
    Active Protocol instances keyed by their opaque connection id. Each TCP
    connection corresponds to one Protocol.
    """

    tasks: set[asyncio.Task[None]] = field(default_factory=set)
    """
    Set of running reader tasks, one per connection.
    Each task must be registered and later removed via a
    task.add_done_callback(tasks.discard) to enable clean shutdown.
    """

    ids: Iterator[int] = field(default_factory=lambda: itertools.count(1))
    """
    Source of connection ids. Ids are never reused within a process.
    """

    def next_id(self) -> int:
        return next(self.ids)
