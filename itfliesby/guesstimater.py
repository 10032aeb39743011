"""Estimate how many CPU cycles each frame can spend at common frame rates."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

import psutil

__all__ = [
    "ProcessorInfo",
    "FrameCycles",
    "frame_cycles",
    "cores_count",
    "cpu_speed_mhz",
    "cache_line_size",
    "processor_info",
    "main",
]

_U32_MASK = 0xFFFFFFFF
_CYCLES_PER_MHZ = 1_000_000


@dataclass(frozen=True)
class ProcessorInfo:
    cores_count: int
    cache_line_size_bytes: int
    speed_mhz: int


@dataclass(frozen=True)
class FrameCycles:
    cycles_per_frame_fps_030: int
    cycles_per_frame_fps_060: int
    cycles_per_frame_fps_120: int
    cycles_per_frame_fps_240: int


def _cycles(speed_mhz: int, fps: int) -> int:
    return ((speed_mhz // fps) * _CYCLES_PER_MHZ) & _U32_MASK


def frame_cycles(speed_mhz: int) -> FrameCycles:
    """Theoretical cycles per frame; the megahertz are divided as whole numbers."""
    if not isinstance(speed_mhz, int) or isinstance(speed_mhz, bool) or speed_mhz < 0:
        raise ValueError(f"speed_mhz must be a non-negative integer, not {speed_mhz!r}")
    return FrameCycles(
        _cycles(speed_mhz, 30),
        _cycles(speed_mhz, 60),
        _cycles(speed_mhz, 120),
        _cycles(speed_mhz, 240),
    )


def cores_count() -> int:
    """Number of logical processors, or 0 when it cannot be determined."""
    return os.cpu_count() or 0


def cpu_speed_mhz() -> int:
    """The highest rated processor speed in MHz, or 0 when unknown."""
    try:
        frequency = psutil.cpu_freq()
    except (OSError, NotImplementedError, AttributeError):
        return 0
    if frequency is None:
        return 0
    speed = frequency.max or frequency.current or 0
    return int(speed)


def _cache_line_from_sysfs() -> int:
    cache_dir = Path("/sys/devices/system/cpu/cpu0/cache")
    largest = 0
    try:
        entries = list(cache_dir.glob("index*/coherency_line_size"))
    except OSError:
        return 0
    for entry in entries:
        try:
            largest = max(largest, int(entry.read_text().strip()))
        except (OSError, ValueError):
            continue
    return largest


def cache_line_size() -> int:
    """The largest cache line size in bytes, or 0 when unknown."""
    largest = _cache_line_from_sysfs()
    if largest:
        return largest
    try:
        value = os.sysconf("SC_LEVEL1_DCACHE_LINESIZE")
    except (AttributeError, ValueError, OSError):
        return 0
    return max(int(value), 0)


def processor_info() -> ProcessorInfo:
    """Gather the processor facts the estimate is based on."""
    return ProcessorInfo(
        cores_count=cores_count(),
        cache_line_size_bytes=cache_line_size(),
        speed_mhz=cpu_speed_mhz(),
    )


def main(argv=None) -> int:
    """Print the processor facts and the theoretical cycles per frame."""
    parser = argparse.ArgumentParser(
        prog="itfliesby-guesstimater",
        description="Estimate CPU cycles available per frame.",
    )
    parser.parse_args(argv)

    info = processor_info()
    cycles = frame_cycles(info.speed_mhz)
    print(f"cores:            {info.cores_count}")
    print(f"cache line bytes: {info.cache_line_size_bytes}")
    print(f"speed mhz:        {info.speed_mhz}")
    print(f"cycles @ 30 fps:  {cycles.cycles_per_frame_fps_030}")
    print(f"cycles @ 60 fps:  {cycles.cycles_per_frame_fps_060}")
    print(f"cycles @ 120 fps: {cycles.cycles_per_frame_fps_120}")
    print(f"cycles @ 240 fps: {cycles.cycles_per_frame_fps_240}")
    return 0