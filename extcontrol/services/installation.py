from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from extcontrol.domain.models import InstallationSettings
from extcontrol.services.paths import templates_dir as default_templates_dir
from extcontrol.services.script_writer import ScriptWriter


DEFAULT_CONTROL_LOOP_TEMPLATE = "control_loop.script.j2"


class InstallationError(Exception):
    """Raised when the installation cannot produce its control loop."""


class InstallationNotFoundError(InstallationError):
    """Raised when no installation node is available for the program node."""


class InstallationNode(Protocol):
    def get_name(self) -> str | None: ...

    def get_control_loop(self, writer: ScriptWriter) -> str:
        """Return the control-loop body; it is appended to ``writer`` unchanged.

        Must return a string (possibly empty). Anything else is rejected by
        ``ScriptWriter.append_raw`` with ``TypeError``.
        """
        ...


InstallationProvider = Callable[[], InstallationNode]


def static_installation(node: InstallationNode) -> InstallationProvider:
    return lambda: node


def missing_installation() -> InstallationNode:
    raise InstallationNotFoundError("No external control installation node is configured.")


class TemplateInstallationNode:
    """Installation node that renders its control loop from a Jinja2 template."""

    def __init__(
        self,
        settings: InstallationSettings,
        template_root: Path | None = None,
        template_name: str = DEFAULT_CONTROL_LOOP_TEMPLATE,
    ) -> None:
        self.settings = settings
        self.template_root = template_root or default_templates_dir()
        self.template_name = template_name
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_root)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def get_name(self) -> str:
        return self.settings.name

    def get_control_loop(self, writer: ScriptWriter) -> str:
        context = {
            "name": self.settings.name,
            "host_ip": self.settings.host_ip,
            "custom_port": self.settings.custom_port,
        }
        try:
            template = self.env.get_template(self.template_name)
            return template.render(**context)
        except TemplateError as exc:
            raise InstallationError(
                f"Failed to render control loop template '{self.template_name}': {exc}"
            ) from exc
