from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Literal


Lifecycle = Literal["closed", "open"]


@dataclass(frozen=True)
class InfoLabelState:
    host_ip: str = ""
    custom_port: str = ""
    last_updated_utc: str = ""


@dataclass(frozen=True)
class FieldState:
    values: dict[str, str] = field(default_factory=dict)
    last_updated_utc: str = ""


@dataclass(frozen=True)
class NodeViewState:
    lifecycle: Lifecycle = "closed"
    info: InfoLabelState = field(default_factory=InfoLabelState)
    fields: FieldState = field(default_factory=FieldState)
    advanced_visible: bool = False


Listener = Callable[[NodeViewState], None]


def _now_utc() -> str:
    return datetime.now(timezone.utc).isoformat()


class NodeViewStateStore:
    """Headless program-node view: holds display state and notifies subscribers.

    Implements the display hooks the program node pushes to, so a widget layer
    of any toolkit only has to subscribe and render ``NodeViewState``.
    """

    def __init__(self) -> None:
        self._state = NodeViewState()
        self._listeners: list[Listener] = []

    def snapshot(self) -> NodeViewState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_lifecycle(self, lifecycle: Lifecycle) -> None:
        self._publish(replace(self._state, lifecycle=lifecycle))

    def update_info_label(self, address: str, port: str) -> None:
        info = InfoLabelState(
            host_ip=str(address),
            custom_port=str(port),
            last_updated_utc=_now_utc(),
        )
        self._publish(replace(self._state, info=info))

    def update_field(self, key: str, value: str) -> None:
        values = dict(self._state.fields.values)
        values[key] = str(value)
        fields = FieldState(values=values, last_updated_utc=_now_utc())
        self._publish(replace(self._state, fields=fields))

    def show_advanced_parameters(self, visible: bool) -> None:
        self._publish(replace(self._state, advanced_visible=bool(visible)))

    def _publish(self, next_state: NodeViewState) -> None:
        self._state = next_state
        for listener in list(self._listeners):
            listener(self._state)
