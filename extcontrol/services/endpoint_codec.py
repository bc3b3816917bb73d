from __future__ import annotations

import re

from extcontrol.domain.models import EndpointDescriptor


class EndpointFormatError(ValueError):
    """Raised when a master display string cannot be decoded."""


_PORT_PATTERN = re.compile(r"^[1-9][0-9]{0,4}$")


def _split_target(target: str) -> tuple[str, str]:
    raw = target.strip()
    if raw.startswith("["):
        closing = raw.find("]")
        if closing == -1 or raw[closing + 1 : closing + 2] != ":":
            raise EndpointFormatError(f"Malformed bracketed address: {target!r}.")
        address = raw[1:closing]
        port = raw[closing + 2 :]
    else:
        address, separator, port = raw.rpartition(":")
        if not separator:
            raise EndpointFormatError(f"Missing port separator in {target!r}.")
    address = address.strip()
    port = port.strip()

    if not address:
        raise EndpointFormatError(f"Missing address in {target!r}.")
    if any(char.isspace() for char in address) or any(char in "()[]" for char in address):
        raise EndpointFormatError(f"Invalid address {address!r}.")
    if not _PORT_PATTERN.match(port) or int(port) > 65535:
        raise EndpointFormatError(f"Invalid port {port!r}.")
    return address, port


def parse_endpoint(display: str) -> EndpointDescriptor:
    if not isinstance(display, str):
        raise EndpointFormatError(f"Expected a string, got {type(display).__name__}.")
    text = display.strip()
    if not text:
        raise EndpointFormatError("Master selection is empty.")

    if text.endswith(")"):
        # The target is the last "(...)" group; anything before it is the name.
        name_part, opening, target = text[:-1].rpartition("(")
        if not opening or ")" in target:
            raise EndpointFormatError(f"Unbalanced parentheses in {display!r}.")
        name = name_part.strip()
    else:
        name = ""
        target = text
    if "\n" in name or "\r" in name:
        raise EndpointFormatError("Master name must be a single line.")

    address, port = _split_target(target)
    return EndpointDescriptor(name=name, address=address, port=port)


def try_parse_endpoint(display: str) -> EndpointDescriptor | None:
    try:
        return parse_endpoint(display)
    except EndpointFormatError:
        return None


def format_endpoint(endpoint: EndpointDescriptor) -> str:
    address = endpoint.address
    if ":" in address:
        address = f"[{address}]"
    target = f"{address}:{endpoint.port}"
    if not endpoint.name:
        return target
    return f"{endpoint.name} ({target})"
