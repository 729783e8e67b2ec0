"""Command table defaults and configuration loading."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ValidationError
from .utils import load_yaml

DEFAULT_COMMANDS: Dict[str, List[str]] = {
    "cpu": ["lscpu", "-J"],
    "gpu": ["lspci", "-n"],
    "screen": ["xrandr"],
    "space": ["df"],
    "arch": ["dpkg", "--print-architecture"],
}

# The dynamic loader prints its glibc-hwcaps search list with --help.
HWCAP_COMMANDS: Dict[str, List[str]] = {
    "x86_64": ["/lib64/ld-linux-x86-64.so.2", "--help"],
    "ppc64le": ["/lib64/ld64.so.2", "--help"],
    "s390x": ["/lib/ld64.so.1", "--help"],
}


def default_hwcap_command(machine: str | None = None) -> Optional[List[str]]:
    machine = platform.machine() if machine is None else machine
    command = HWCAP_COMMANDS.get(machine)
    return list(command) if command else None


@dataclass(slots=True)
class CommandSet:
    cpu: List[str] = field(default_factory=lambda: list(DEFAULT_COMMANDS["cpu"]))
    gpu: List[str] = field(default_factory=lambda: list(DEFAULT_COMMANDS["gpu"]))
    screen: List[str] = field(default_factory=lambda: list(DEFAULT_COMMANDS["screen"]))
    space: List[str] = field(default_factory=lambda: list(DEFAULT_COMMANDS["space"]))
    arch: List[str] = field(default_factory=lambda: list(DEFAULT_COMMANDS["arch"]))
    hwcap: Optional[List[str]] = field(default_factory=default_hwcap_command)

    def as_dict(self) -> Dict[str, Optional[List[str]]]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


def _parse_command(value: Any, context: str) -> List[str]:
    if isinstance(value, str):
        command = value.split()
    elif isinstance(value, (list, tuple)):
        command = [str(item) for item in value]
    else:
        raise ValidationError(f"{context}: command must be a string or a list")
    if not command:
        raise ValidationError(f"{context}: command must not be empty")
    return command


def parse_command_set(payload: Dict[str, Any], context: str) -> CommandSet:
    commands = payload.get("commands", {}) or {}
    if not isinstance(commands, dict):
        raise ValidationError(f"{context}: 'commands' must be a mapping")
    known = set(CommandSet.__dataclass_fields__)
    overrides: Dict[str, Optional[List[str]]] = {}
    for name, value in commands.items():
        if name not in known:
            raise ValidationError(f"{context}: unknown command '{name}'")
        if value is None:
            if name != "hwcap":
                raise ValidationError(f"{context}: command '{name}' cannot be disabled")
            overrides[name] = None
            continue
        overrides[name] = _parse_command(value, f"{context} command '{name}'")
    return CommandSet(**overrides)


def load_command_set(path: Path | None) -> CommandSet:
    if path is None or not path.exists():
        return CommandSet()
    payload = load_yaml(path)
    if payload is None:
        return CommandSet()
    if not isinstance(payload, dict):
        raise ValidationError(f"{path}: expected mapping at root")
    return parse_command_set(payload, f"{path}")

