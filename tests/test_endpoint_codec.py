from __future__ import annotations

import itertools
import time

import pytest

from extcontrol.domain.models import EndpointDescriptor
from extcontrol.services.endpoint_codec import (
    EndpointFormatError,
    format_endpoint,
    parse_endpoint,
    try_parse_endpoint,
)


def test_parse_labeled_display() -> None:
    endpoint = parse_endpoint("B (10.0.0.2:50003)")
    assert endpoint == EndpointDescriptor(name="B", address="10.0.0.2", port="50003")


def test_parse_tolerates_whitespace_and_unlabeled_forms() -> None:
    assert parse_endpoint("  Lab PC  ( 10.0.0.7 : 50002 )  ") == EndpointDescriptor(
        name="Lab PC", address="10.0.0.7", port="50002"
    )
    assert parse_endpoint("(10.0.0.7:50002)") == EndpointDescriptor(
        address="10.0.0.7", port="50002"
    )
    assert parse_endpoint("ros-host.local:30002") == EndpointDescriptor(
        address="ros-host.local", port="30002"
    )


def test_parse_keeps_parentheses_inside_name() -> None:
    endpoint = parse_endpoint("Cell 3 (left arm) (192.168.1.40:50002)")
    assert endpoint.name == "Cell 3 (left arm)"
    assert endpoint.address == "192.168.1.40"
    assert endpoint.port == "50002"


def test_parse_ipv6_addresses() -> None:
    assert parse_endpoint("[::1]:50002").address == "::1"
    bracketed = parse_endpoint("Bench ([fe80::1]:50002)")
    assert bracketed.address == "fe80::1"
    assert bracketed.port == "50002"
    bare = parse_endpoint("Bench (fe80::1:50002)")
    assert bare.address == "fe80::1"
    assert bare.port == "50002"


@pytest.mark.parametrize(
    "display",
    [
        "",
        "   ",
        "no port here",
        "A (10.0.0.1)",
        "A (10.0.0.1:)",
        "A (:50002)",
        "A (10.0.0.1:port)",
        "A (10.0.0.1:0)",
        "A (10.0.0.1:65536)",
        "A (10.0.0.1:050002)",
        "A (10 0 0 1:50002)",
        "A ([::1:50002)",
        "two\nlines (10.0.0.1:50002)",
    ],
)
def test_parse_rejects_malformed_displays(display: str) -> None:
    with pytest.raises(EndpointFormatError):
        parse_endpoint(display)
    assert try_parse_endpoint(display) is None


def test_parse_rejects_non_string_input() -> None:
    with pytest.raises(EndpointFormatError, match="Expected a string"):
        parse_endpoint(None)  # type: ignore[arg-type]


def test_format_is_canonical_inverse_of_parse() -> None:
    displays = [
        "A (10.0.0.1:50002)",
        "Cell 3 (left arm) (192.168.1.40:1)",
        "10.0.0.1:65535",
        "Bench ([fe80::1]:50002)",
        "[::1]:50002",
    ]
    for display in displays:
        assert format_endpoint(parse_endpoint(display)) == display


def test_format_normalizes_equivalent_spellings() -> None:
    assert format_endpoint(parse_endpoint(" (10.0.0.1 : 50002) ")) == "10.0.0.1:50002"
    assert format_endpoint(parse_endpoint("Bench (fe80::1:50002)")) == "Bench ([fe80::1]:50002)"


def test_same_target_ignores_name() -> None:
    first = EndpointDescriptor(name="A", address="10.0.0.1", port="50002")
    renamed = EndpointDescriptor(name="Renamed", address="10.0.0.1", port="50002")
    moved = EndpointDescriptor(name="A", address="10.0.0.1", port="50003")

    assert first.same_target(renamed)
    assert not first.same_target(moved)
    assert first != renamed


_NAMES = ["", "A", "Cell 3 (left arm)", "(x)", "Lab: PC", "ünïcode name"]
_ADDRESSES = ["10.0.0.1", "ros-host.local", "::1", "fe80::1"]
_PORTS = ["1", "50002", "65535"]


@pytest.mark.parametrize(
    "endpoint",
    [
        EndpointDescriptor(name=name, address=address, port=port)
        for name, address, port in itertools.product(_NAMES, _ADDRESSES, _PORTS)
    ],
    ids=lambda endpoint: format_endpoint(endpoint),
)
def test_parse_inverts_format_for_valid_descriptors(endpoint: EndpointDescriptor) -> None:
    assert parse_endpoint(format_endpoint(endpoint)) == endpoint


@pytest.mark.parametrize(
    "display",
    [
        "a" + " " * 200_000 + "b",
        "a" + " " * 200_000 + "b)",
        "(" * 100_000 + "10.0.0.1:50002)",
        "x" * 200_000 + " (10.0.0.1:50002)",
    ],
    ids=["spaces", "spaces-closing", "openings", "long-name"],
)
def test_parse_runs_in_linear_time_on_long_input(display: str) -> None:
    started = time.perf_counter()
    try_parse_endpoint(display)
    assert time.perf_counter() - started < 1.0
