"""Records exchanged with the scheduler and the container executor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Presence(enum.Enum):
    ORDINARY = "ordinary"
    EVACUATING = "evacuating"
    SUSPECT = "suspect"


@dataclass(frozen=True)
class ActualLRPKey:
    process_guid: str
    index: int
    domain: str


@dataclass(frozen=True)
class ActualLRPInstanceKey:
    instance_guid: str
    cell_id: str


@dataclass
class ActualLRP:
    key: ActualLRPKey
    instance_key: ActualLRPInstanceKey
    presence: Presence = Presence.ORDINARY


@dataclass(frozen=True)
class ActualLRPFilter:
    cell_id: str = ""
    domain: str = ""


@dataclass
class LogConfig:
    guid: str = ""
    source_name: str = ""
    index: int = 0
    tags: dict[str, str] = field(default_factory=dict)

    def source_name_and_tags(self) -> tuple[str, dict[str, str]]:
        """Return the log source name and the tags to attach to app logs."""
        tags = dict(self.tags)
        tags["source_id"] = self.guid
        tags["instance_id"] = str(self.index)
        return self.source_name, tags


@dataclass
class RunInfo:
    log_config: LogConfig = field(default_factory=LogConfig)


class ContainerState(enum.Enum):
    RESERVED = "reserved"
    INITIALIZING = "initializing"
    CREATED = "created"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class Container:
    guid: str
    state: ContainerState = ContainerState.RUNNING
    run_info: RunInfo = field(default_factory=RunInfo)
    tags: dict[str, str] = field(default_factory=dict)