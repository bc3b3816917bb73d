from __future__ import annotations

from extcontrol.domain.models import (
    GAIN_SERVO_J_DEFAULT,
    GAIN_SERVO_J_KEY,
    MAX_LOST_PACKAGES_DEFAULT,
    MAX_LOST_PACKAGES_KEY,
)
from extcontrol.services.action_log import ActionLogService
from extcontrol.services.installation import InstallationNode, InstallationProvider
from extcontrol.services.parameter_store import NodeView, ParameterStoreService
from extcontrol.services.script_writer import ScriptWriter
from extcontrol.services.settings_model import DataModel
from extcontrol.services.undo_redo import UndoRedoManager


TITLE_PREFIX = "Control by "


class ExternalControlProgramNode:
    """Program node that hands script generation to the installation node.

    The host drives it with plain synchronous calls: ``open_view`` and
    ``close_view`` for the lifecycle, the ``on_*`` handlers for user edits and
    ``generate_script`` when the robot program is built.
    """

    def __init__(
        self,
        store: ParameterStoreService,
        installation_provider: InstallationProvider,
        view: NodeView | None = None,
        action_log: ActionLogService | None = None,
    ) -> None:
        self.store = store
        self.installation_provider = installation_provider
        self.view = view
        self.action_log = action_log or store.action_log
        self._open = False

    @classmethod
    def create(
        cls,
        model: DataModel,
        installation_provider: InstallationProvider,
        *,
        view: NodeView | None = None,
        undo_manager: UndoRedoManager | None = None,
        action_log: ActionLogService | None = None,
    ) -> "ExternalControlProgramNode":
        store = ParameterStoreService(
            model,
            undo_manager or UndoRedoManager(model),
            view=view,
            action_log=action_log,
        )
        return cls(store, installation_provider, view=view, action_log=action_log)

    @property
    def undo_manager(self) -> UndoRedoManager:
        return self.store.undo_manager

    @property
    def is_open(self) -> bool:
        return self._open

    def open_view(self) -> None:
        self._open = True
        if self.view is None:
            return
        set_lifecycle = getattr(self.view, "set_lifecycle", None)
        if callable(set_lifecycle):
            set_lifecycle("open")
        self.view.update_info_label(self.store.master_address(), self.store.master_port())

    def close_view(self) -> None:
        self._open = False
        set_lifecycle = getattr(self.view, "set_lifecycle", None)
        if callable(set_lifecycle):
            set_lifecycle("closed")

    def _installation(self) -> InstallationNode:
        return self.installation_provider()

    def title(self) -> str:
        name = self._installation().get_name()
        return f"{TITLE_PREFIX}{name or ''}"

    def is_defined(self) -> bool:
        return True

    def generate_script(self, writer: ScriptWriter) -> str:
        control_loop = self._installation().get_control_loop(writer)
        writer.append_raw(control_loop)
        self.action_log.log_event("script_generated", characters=len(control_loop or ""))
        return control_loop

    def initial_max_lost_packages(self) -> str:
        return str(self.store.get_param(MAX_LOST_PACKAGES_KEY, MAX_LOST_PACKAGES_DEFAULT))

    def on_max_lost_packages_entered(self, value: str) -> None:
        self.store.set_param(MAX_LOST_PACKAGES_KEY, value, MAX_LOST_PACKAGES_DEFAULT)
        if self.view is not None:
            self.view.update_field(MAX_LOST_PACKAGES_KEY, value)

    def initial_gain_servo_j(self) -> str:
        return str(self.store.get_param(GAIN_SERVO_J_KEY, GAIN_SERVO_J_DEFAULT))

    def on_gain_servo_j_entered(self, value: str) -> None:
        self.store.set_param(GAIN_SERVO_J_KEY, value, GAIN_SERVO_J_DEFAULT)
        if self.view is not None:
            self.view.update_field(GAIN_SERVO_J_KEY, value)

    def on_advanced_toggled(self, show: bool) -> None:
        self.store.set_advanced_visible(show)

    def on_master_selected(self, selected: str) -> bool:
        return self.store.set_endpoint(selected)
