"""Snapshot data model and its one-time JSON encoding."""
import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List


@dataclass
class MemoryUsage:
    total_space: int
    used_space: int


@dataclass
class CpuUsage:
    usage: float


@dataclass
class DiskUsage:
    mount: str
    total_space: int
    used_space: int


@dataclass
class NetworkUsage:
    received: int
    transmitted: int


@dataclass
class Snapshot:
    timestamp: int
    memory: MemoryUsage
    swap: MemoryUsage
    cpus: List[CpuUsage] = field(default_factory=list)
    disks: Dict[str, DiskUsage] = field(default_factory=dict)
    networks: Dict[str, NetworkUsage] = field(default_factory=dict)


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialize a snapshot to compact UTF-8 JSON bytes."""
    return json.dumps(asdict(snapshot), separators=(",", ":")).encode("utf-8")
