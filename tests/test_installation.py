from __future__ import annotations

import pytest
from pydantic import ValidationError

from extcontrol.domain.models import InstallationSettings
from extcontrol.services.installation import (
    InstallationError,
    InstallationNotFoundError,
    TemplateInstallationNode,
    missing_installation,
    static_installation,
)
from extcontrol.services.script_writer import ScriptWriter


def test_template_installation_renders_host_and_port() -> None:
    node = TemplateInstallationNode(
        InstallationSettings(name="Lab Control", host_ip="10.0.0.2", custom_port=50003)
    )

    loop = node.get_control_loop(ScriptWriter())

    assert node.get_name() == "Lab Control"
    assert 'socket_open("10.0.0.2", 50003, "external_control")' in loop
    assert "Lab Control" in loop
    assert loop.endswith("\n")


def test_template_installation_wraps_missing_template(tmp_path) -> None:
    node = TemplateInstallationNode(
        InstallationSettings(host_ip="10.0.0.2"),
        template_root=tmp_path,
    )
    with pytest.raises(InstallationError, match="control_loop.script.j2"):
        node.get_control_loop(ScriptWriter())


def test_template_installation_fails_on_undefined_variables(tmp_path) -> None:
    (tmp_path / "loop.j2").write_text("connect({{ robot_ip }})\n", encoding="utf-8")
    node = TemplateInstallationNode(
        InstallationSettings(host_ip="10.0.0.2"),
        template_root=tmp_path,
        template_name="loop.j2",
    )
    with pytest.raises(InstallationError, match="robot_ip"):
        node.get_control_loop(ScriptWriter())


def test_installation_settings_validate_port_and_host() -> None:
    with pytest.raises(ValidationError):
        InstallationSettings(host_ip="10.0.0.2", custom_port=70000)
    with pytest.raises(ValidationError):
        InstallationSettings(host_ip="")


def test_installation_providers() -> None:
    node = TemplateInstallationNode(InstallationSettings(host_ip="10.0.0.2"))
    assert static_installation(node)() is node
    with pytest.raises(InstallationNotFoundError):
        missing_installation()
