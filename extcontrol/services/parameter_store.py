from __future__ import annotations

from typing import Any, Protocol

from extcontrol.domain.models import (
    ADVANCED_PARAM_DEFAULT,
    ADVANCED_PARAM_KEY,
    DEFAULT_MASTER,
    DEFAULT_MASTER_NAME,
    DEFAULT_PORT,
    GAIN_SERVO_J_DEFAULT,
    GAIN_SERVO_J_KEY,
    MASTER_KEY,
    MASTER_NAME_KEY,
    MAX_LOST_PACKAGES_DEFAULT,
    MAX_LOST_PACKAGES_KEY,
    PORT_KEY,
    EndpointDescriptor,
    NodeParameters,
)
from extcontrol.services.action_log import ActionLogService
from extcontrol.services.endpoint_codec import EndpointFormatError, format_endpoint, parse_endpoint
from extcontrol.services.settings_model import DataModel
from extcontrol.services.undo_redo import ParameterChange, UndoRedoManager


class NodeView(Protocol):
    def update_info_label(self, address: str, port: str) -> None: ...

    def update_field(self, key: str, value: str) -> None: ...

    def show_advanced_parameters(self, visible: bool) -> None: ...


class ParameterStoreService:
    """Typed access to the node's persisted parameters.

    Reads fall back to caller supplied defaults, and every write goes through
    the undo manager as a single ``ParameterChange``. The master endpoint is
    always written as one change covering name, address and port.
    """

    def __init__(
        self,
        model: DataModel,
        undo_manager: UndoRedoManager,
        view: NodeView | None = None,
        action_log: ActionLogService | None = None,
    ) -> None:
        self.model = model
        self.undo_manager = undo_manager
        self.view = view
        self.action_log = action_log or ActionLogService.disabled()

    def get_param(self, key: str, default: Any) -> Any:
        return self.model.get(key, default)

    def set_param(self, key: str, value: Any, default: Any) -> None:
        reset = value is None or value == ""
        stored = default if reset else value
        self.undo_manager.record_changes(ParameterChange.single(key, stored))
        self.action_log.log_event("parameter_set", key=key, value=stored, reset=reset)

    def get_advanced_visible(self) -> bool:
        return self.model.get(ADVANCED_PARAM_KEY, ADVANCED_PARAM_DEFAULT) is True

    def set_advanced_visible(self, show: bool) -> None:
        show = bool(show)
        # The view follows the toggle right away; undo/redo only touches the stored flag.
        if self.view is not None:
            self.view.show_advanced_parameters(show)
        self.undo_manager.record_changes(
            ParameterChange.single(ADVANCED_PARAM_KEY, show, label="Toggle advanced parameters")
        )
        self.action_log.log_event("advanced_visibility_set", visible=show)

    def master_name(self) -> str:
        return str(self.model.get(MASTER_NAME_KEY, DEFAULT_MASTER_NAME))

    def master_address(self) -> str:
        return str(self.model.get(MASTER_KEY, DEFAULT_MASTER))

    def master_port(self) -> str:
        return str(self.model.get(PORT_KEY, DEFAULT_PORT))

    def current_endpoint(self) -> EndpointDescriptor:
        return EndpointDescriptor(
            name=self.master_name(),
            address=self.master_address(),
            port=self.master_port(),
        )

    def set_endpoint(self, selected: str) -> bool:
        """Store the master decoded from ``selected``.

        Returns False without recording anything when the string cannot be
        decoded or when it points at the stored address and port.
        """
        try:
            master = parse_endpoint(selected)
        except EndpointFormatError as exc:
            self.action_log.log_event("endpoint_rejected", selected=str(selected), error=str(exc))
            return False

        if master.same_target(self.current_endpoint()):
            self.action_log.log_event("endpoint_unchanged", endpoint=format_endpoint(master))
            return False

        self.undo_manager.record_changes(
            ParameterChange(
                label=f"Set master to {format_endpoint(master)}",
                writes=(
                    (MASTER_NAME_KEY, master.name),
                    (MASTER_KEY, master.address),
                    (PORT_KEY, master.port),
                ),
            )
        )
        self.action_log.log_event(
            "endpoint_selected",
            name=master.name,
            address=master.address,
            port=master.port,
        )
        return True

    def snapshot(self) -> NodeParameters:
        return NodeParameters(
            show_advanced_params=self.get_advanced_visible(),
            max_lost_packages=str(self.get_param(MAX_LOST_PACKAGES_KEY, MAX_LOST_PACKAGES_DEFAULT)),
            gain_servo_j=str(self.get_param(GAIN_SERVO_J_KEY, GAIN_SERVO_J_DEFAULT)),
            master=self.current_endpoint(),
        )
