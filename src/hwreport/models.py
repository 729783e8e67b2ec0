"""Data models for hwreport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class TreeEntry:
    label: str
    data: str = ""
    children: List["TreeEntry"] = field(default_factory=list)


@dataclass(slots=True)
class CPUInfo:
    op_mode: str = ""
    cpus: str = ""
    threads: str = ""
    cores: str = ""
    sockets: str = ""
    vendor: str = ""
    family: str = ""
    model: str = ""
    stepping: str = ""
    name: str = ""
    virtualization: str = ""
    hypervisor: str = ""
    virtualization_type: str = ""


@dataclass(slots=True)
class GPUInfo:
    vendor: str
    model: str


@dataclass(slots=True)
class ScreenInfo:
    size: str
    resolution: str
    frequency: str
