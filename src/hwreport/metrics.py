"""Hardware fact collectors built on the command/filter/tree pipeline."""

from __future__ import annotations

import io
import logging
import re
from typing import Callable, Dict, List

from .config import CommandSet
from .exceptions import HwReportError, NotFoundError
from .filters import filter_all, filter_first
from .models import CPUInfo, GPUInfo, ScreenInfo, TreeEntry
from .process import combined_output, run_command
from .tree import parse_tree

logger = logging.getLogger(__name__)

GPU_PATTERN = re.compile(r"^.* 0300: ([a-zA-Z0-9]+:[a-zA-Z0-9]+)( \(rev .*\))?$")
SCREEN_PATTERN = re.compile(r"^(?: +(.*)\*|.* connected(?: .*)? (\d+mm x \d+mm))")
PARTITION_PATTERN = re.compile(r"^/dev/([^\s]+ +[^\s]*).*$")
HWCAP_PATTERN = re.compile(r"^(?:(.*) +.*supported, searched.*)")

HWCAP_MARKER = b"Subdirectories of glibc-hwcaps"
HWCAP_LEGACY_MARKER = b"Legacy HWCAP subdirectories"
HWCAP_NONE_SUPPORTED = "-"

KB_PER_GB = 1024 * 1024

_CPU_FIELDS: Dict[str, str] = {
    "CPU op-mode(s):": "op_mode",
    "CPU(s):": "cpus",
    "Thread(s) per core:": "threads",
    "Core(s) per socket:": "cores",
    "Socket(s):": "sockets",
    "Vendor ID:": "vendor",
    "CPU family:": "family",
    "Model:": "model",
    "Stepping:": "stepping",
    "Model name:": "name",
    "Virtualization:": "virtualization",
    "Hypervisor vendor:": "hypervisor",
    "Virtualization type:": "virtualization_type",
}


def populate_cpu_info(entries: List[TreeEntry], info: CPUInfo) -> CPUInfo:
    """Copy known labels into ``info``, descending into children after each entry."""
    for entry in entries:
        attribute = _CPU_FIELDS.get(entry.label)
        if attribute is not None:
            setattr(info, attribute, entry.data)
        if entry.children:
            populate_cpu_info(entry.children, info)
    return info


def kb_to_gb(value: str) -> float:
    return int(value) / KB_PER_GB


class Metrics:
    """Collects each hardware domain by running its configured command."""

    def __init__(self, commands: CommandSet | None = None) -> None:
        self.commands = commands or CommandSet()

    def collectors(self) -> Dict[str, Callable[[], object]]:
        return {
            "cpu": self.get_cpu,
            "gpu": self.get_gpu,
            "screens": self.get_screens,
            "partitions": self.get_partitions,
            "arch": self.get_arch,
            "hwcap": self.get_hwcap,
        }

    def get_cpu(self) -> CPUInfo:
        stream = run_command(self.commands.cpu)
        try:
            root = parse_tree(stream)
        except (HwReportError, OSError) as exc:
            logger.warning("couldn't get CPU info: %s", exc)
            return CPUInfo()
        finally:
            stream.close()
        try:
            return populate_cpu_info(root.children, CPUInfo())
        except RecursionError:
            logger.warning("couldn't get CPU info: tree nested too deeply")
            return CPUInfo()

    def get_gpu(self) -> List[GPUInfo]:
        stream = run_command(self.commands.gpu)
        try:
            results = filter_all(stream, GPU_PATTERN)
        except (HwReportError, OSError) as exc:
            logger.warning("couldn't get GPU info: %s", exc)
            return []
        finally:
            stream.close()

        gpus: List[GPUInfo] = []
        for result in results:
            parts = result.split(":", 1)
            if len(parts) != 2:
                logger.info("GPU info should be of form vendor:model, got: %s", result)
                continue
            gpus.append(GPUInfo(vendor=parts[0], model=parts[1]))
        return gpus

    def get_screens(self) -> List[ScreenInfo]:
        stream = run_command(self.commands.screen)
        try:
            results = filter_all(stream, SCREEN_PATTERN)
        except (HwReportError, OSError) as exc:
            logger.warning("couldn't get screen info: %s", exc)
            return []
        finally:
            stream.close()

        screens: List[ScreenInfo] = []
        last_size = ""
        for result in results:
            if "mm" in result:
                last_size = result.replace(" ", "")
                continue
            tokens = result.split()
            if len(tokens) < 2:
                logger.info(
                    "screen info should be a physical size or a resolution and frequency, got: %s",
                    result,
                )
                continue
            if not last_size:
                logger.info("no physical size seen before resolution and frequency: %s", result)
                continue
            screens.append(ScreenInfo(size=last_size, resolution=tokens[0], frequency=tokens[-1]))
        return screens

    def get_partitions(self) -> List[float]:
        stream = run_command(self.commands.space)
        try:
            results = filter_all(stream, PARTITION_PATTERN)
        except (HwReportError, OSError) as exc:
            logger.warning("couldn't get disk info: %s", exc)
            return []
        finally:
            stream.close()

        sizes: List[float] = []
        for result in results:
            # loop devices are excluded after matching, not in the pattern
            if result.startswith("loop"):
                continue
            tokens = result.split()
            if len(tokens) != 2:
                logger.info("partition size should be of form 'device size', got: %s", result)
                continue
            try:
                sizes.append(kb_to_gb(tokens[1]))
            except ValueError as exc:
                logger.info("partition size should be an integer: %s", exc)
        return sizes

    def get_arch(self) -> str:
        try:
            output = combined_output(self.commands.arch)
        except HwReportError as exc:
            logger.warning("couldn't get architecture: %s", exc)
            return ""
        return output.decode("utf-8", errors="replace").strip()

    def get_hwcap(self) -> str:
        if self.commands.hwcap is None:
            logger.debug("no hwcap command for this architecture")
            return ""

        stream = run_command(self.commands.hwcap)
        try:
            output = stream.read()
        except (HwReportError, OSError) as exc:
            logger.warning("couldn't get hwcap: %s", exc)
            return ""
        finally:
            stream.close()

        marker_index = output.find(HWCAP_MARKER)
        if marker_index < 0:
            return ""
        legacy_index = output.find(HWCAP_LEGACY_MARKER, marker_index)
        if legacy_index >= 0:
            output = output[:legacy_index]

        try:
            level = filter_first(io.BytesIO(output), HWCAP_PATTERN)
        except NotFoundError as exc:
            logger.info("no supported hwcap: %s", exc)
            return HWCAP_NONE_SUPPORTED
        return level.strip()
