import logging
import time
from typing import Dict

import psutil

from .snapshot import CpuUsage, DiskUsage, MemoryUsage, NetworkUsage, Snapshot

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def prime_cpu_percent() -> None:
    # The first non-blocking cpu_percent call only records a baseline.
    psutil.cpu_percent(interval=None, percpu=True)


def get_disks() -> Dict[str, DiskUsage]:
    disks: Dict[str, DiskUsage] = {}
    for part in psutil.disk_partitions(all=False):
        if part.device in disks:
            continue
        try:
            usage = psutil.disk_usage(part.mountpoint)
        except OSError as e:
            logger.debug(f"Skipping disk {part.device} at {part.mountpoint}: {e}")
            continue
        used = max(usage.total - usage.free, 0)
        disks[part.device] = DiskUsage(
            mount=part.mountpoint, total_space=usage.total, used_space=used
        )
    return dict(sorted(disks.items()))


def get_networks() -> Dict[str, NetworkUsage]:
    counters = psutil.net_io_counters(pernic=True) or {}
    return {
        name: NetworkUsage(received=c.bytes_recv, transmitted=c.bytes_sent)
        for name, c in sorted(counters.items())
    }


def collect_snapshot(timestamp: int) -> Snapshot:
    """Capture the current host resource usage.

    A single unreadable disk is left out of ``disks``. Failures of the memory,
    swap, CPU or network calls propagate so the caller can skip the cycle.
    """
    ram = psutil.virtual_memory()
    swap = psutil.swap_memory()
    cpus = [CpuUsage(usage=float(p)) for p in psutil.cpu_percent(interval=None, percpu=True)]

    return Snapshot(
        timestamp=int(timestamp),
        memory=MemoryUsage(total_space=ram.total, used_space=ram.used),
        swap=MemoryUsage(total_space=swap.total, used_space=swap.used),
        cpus=cpus,
        disks=get_disks(),
        networks=get_networks(),
    )
