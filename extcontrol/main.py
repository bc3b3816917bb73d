from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from extcontrol.domain.models import (
    ADVANCED_PARAM_KEY,
    GAIN_SERVO_J_DEFAULT,
    GAIN_SERVO_J_KEY,
    MAX_LOST_PACKAGES_DEFAULT,
    MAX_LOST_PACKAGES_KEY,
    InstallationSettings,
)
from extcontrol.services.action_log import ActionLogService
from extcontrol.services.endpoint_codec import format_endpoint, try_parse_endpoint
from extcontrol.services.installation import (
    InstallationError,
    TemplateInstallationNode,
    static_installation,
)
from extcontrol.services.paths import default_settings_path
from extcontrol.services.script_writer import ScriptWriter
from extcontrol.services.settings_model import QSettingsDataModel
from extcontrol.ui.node_state import NodeViewStateStore
from extcontrol.ui.program_node import ExternalControlProgramNode


STRING_PARAMS = {
    MAX_LOST_PACKAGES_KEY: MAX_LOST_PACKAGES_DEFAULT,
    GAIN_SERVO_J_KEY: GAIN_SERVO_J_DEFAULT,
}


def _fail(message: str) -> int:
    print(f"error: {message}", file=sys.stderr)
    return 2


def _parse_bool(raw: str) -> bool | None:
    text = raw.strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return None


def _build_node(args: argparse.Namespace) -> ExternalControlProgramNode:
    settings_path = Path(args.settings).expanduser() if args.settings else default_settings_path()
    if args.no_log:
        action_log = ActionLogService.disabled()
    elif args.log:
        action_log = ActionLogService(Path(args.log))
    else:
        action_log = ActionLogService()

    try:
        installation = InstallationSettings(
            name=args.installation_name,
            host_ip=args.host_ip,
            custom_port=args.custom_port,
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid installation settings: {exc.errors()[0]['msg']}") from exc

    return ExternalControlProgramNode.create(
        QSettingsDataModel.from_file(settings_path),
        static_installation(TemplateInstallationNode(installation)),
        view=NodeViewStateStore(),
        action_log=action_log,
    )


def cmd_show(args: argparse.Namespace) -> int:
    node = _build_node(args)
    params = node.store.snapshot()
    master = "(none)" if params.master.is_empty else format_endpoint(params.master)
    print(f"{ADVANCED_PARAM_KEY} = {params.show_advanced_params}")
    print(f"{MAX_LOST_PACKAGES_KEY} = {params.max_lost_packages}")
    print(f"{GAIN_SERVO_J_KEY} = {params.gain_servo_j}")
    print(f"master = {master}")
    return 0


def cmd_set(args: argparse.Namespace) -> int:
    node = _build_node(args)
    if args.key == ADVANCED_PARAM_KEY:
        show = _parse_bool(args.value)
        if show is None:
            return _fail(f"Expected a boolean for {ADVANCED_PARAM_KEY}, got {args.value!r}.")
        node.on_advanced_toggled(show)
        print(f"{ADVANCED_PARAM_KEY} = {show}")
        return 0
    if args.key == MAX_LOST_PACKAGES_KEY:
        node.on_max_lost_packages_entered(args.value)
        print(f"{MAX_LOST_PACKAGES_KEY} = {node.initial_max_lost_packages()}")
        return 0
    node.on_gain_servo_j_entered(args.value)
    print(f"{GAIN_SERVO_J_KEY} = {node.initial_gain_servo_j()}")
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    node = _build_node(args)
    default = STRING_PARAMS[args.key]
    node.store.set_param(args.key, "", default)
    print(f"{args.key} = {node.store.get_param(args.key, default)}")
    return 0


def cmd_select_master(args: argparse.Namespace) -> int:
    node = _build_node(args)
    master = try_parse_endpoint(args.display)
    if master is None:
        return _fail(f"Could not parse master selection {args.display!r}.")
    if node.on_master_selected(args.display):
        print(f"Master set to {format_endpoint(master)}.")
    else:
        print("Master unchanged.")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    node = _build_node(args)
    writer = ScriptWriter()
    writer.append_line(f"# {node.title()}")
    node.generate_script(writer)
    script = writer.get_script()
    if args.output:
        target = Path(args.output)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(script, encoding="utf-8")
        print(f"Wrote {target}.")
    else:
        sys.stdout.write(script)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="External control program node parameter helper.",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help=f"INI settings file (default: {default_settings_path()}).",
    )
    parser.add_argument("--log", default=None, help="Action log path.")
    parser.add_argument("--no-log", action="store_true", help="Disable the action log.")
    parser.add_argument(
        "--installation-name",
        default="External Control",
        help="Installation node name used in the title and script.",
    )
    parser.add_argument(
        "--host-ip",
        default="192.168.56.1",
        help="Remote control host IP (default: 192.168.56.1).",
    )
    parser.add_argument(
        "--custom-port",
        type=int,
        default=50002,
        help="Remote control host port (default: 50002).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Show stored node parameters.")
    show_parser.set_defaults(func=cmd_show)

    set_parser = subparsers.add_parser("set", help="Store a node parameter.")
    set_parser.add_argument(
        "key",
        choices=(ADVANCED_PARAM_KEY, MAX_LOST_PACKAGES_KEY, GAIN_SERVO_J_KEY),
    )
    set_parser.add_argument("value", help="New value. An empty string resets to the default.")
    set_parser.set_defaults(func=cmd_set)

    reset_parser = subparsers.add_parser("reset", help="Reset a parameter to its default.")
    reset_parser.add_argument("key", choices=tuple(STRING_PARAMS))
    reset_parser.set_defaults(func=cmd_reset)

    master_parser = subparsers.add_parser(
        "select-master",
        help="Select the remote master, e.g. 'Lab PC (10.0.0.2:50002)'.",
    )
    master_parser.add_argument("display")
    master_parser.set_defaults(func=cmd_select_master)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the program node script from the installation.",
    )
    generate_parser.add_argument("--output", default=None, help="Write to a file instead of stdout.")
    generate_parser.set_defaults(func=cmd_generate)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (InstallationError, ValueError) as exc:
        return _fail(str(exc))


if __name__ == "__main__":
    raise SystemExit(main())
