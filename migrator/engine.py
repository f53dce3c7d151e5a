"""Migration engine boundary.

The engine that shrinks the Windows partition, copies the image and installs
the bootloader lives outside this package. The migrator only hands it the
image, the disk layout and the connection profiles to write.
"""

from __future__ import annotations

import subprocess
import sys
from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from migrator.exceptions import EngineError
from migrator.models.constants import (
    EFI_LABEL,
    MIGRATION_TASKS,
    TARGET_DEVICE,
    WINDOWS_PARTITION,
)
from migrator.models.network_models import ConnectionProfile
from migrator.utils.logger import Logger

if sys.version_info >= (3, 11):  # noqa: UP036
    from enum import StrEnum
else:
    from backports.strenum import StrEnum  # noqa: UP035


class MigrateResult(StrEnum):
    """Outcome reported by the engine."""

    OK = "ok"
    FAILED = "failed"


def tasks_after(last_task: str) -> list[str]:
    """Return the tasks to omit so that ``last_task`` runs last.

    Raises:
        ValueError: If ``last_task`` is not a migration task.
    """
    if last_task not in MIGRATION_TASKS:
        raise ValueError(f"last-task option '{last_task}' not understood")
    return list(MIGRATION_TASKS[MIGRATION_TASKS.index(last_task) + 1 :])


def parse_task_list(value: str) -> list[str]:
    """Split a comma-separated task list, dropping blanks."""
    return [task.strip() for task in value.split(",") if task.strip()]


class MigrateOptions(BaseModel):
    """Options passed to the engine on stdin."""

    model_config = ConfigDict(frozen=True)

    omit_tasks: list[str] = Field(
        default_factory=list, description="Tasks the engine must skip"
    )
    connection_profiles: list[ConnectionProfile] = Field(
        default_factory=list, description="Wi-Fi profiles to write to the target"
    )


class MigrationEngine(ABC):
    """Performs the actual migration."""

    @abstractmethod
    def migrate(
        self,
        image: str,
        options: MigrateOptions,
        partition: str = WINDOWS_PARTITION,
        device: str = TARGET_DEVICE,
        efi_label: str = EFI_LABEL,
    ) -> MigrateResult:
        """Migrate the device to ``image``.

        Args:
            image: Path of the OS image to write.
            options: Tasks to omit and profiles to carry over.
            partition: Drive letter of the Windows partition.
            device: Raw device the image is written to.
            efi_label: Drive letter the EFI partition is mounted on.

        Returns:
            MigrateResult.OK on success.

        Raises:
            EngineError: If the engine cannot be started.
        """
        pass


class CommandEngine(MigrationEngine):
    """Runs an external engine executable.

    The executable receives ``IMAGE PARTITION DEVICE EFI_LABEL`` as
    arguments and the options as JSON on stdin. Its output is not captured.
    """

    def __init__(self, executable: str) -> None:
        self.executable = executable

    def migrate(
        self,
        image: str,
        options: MigrateOptions,
        partition: str = WINDOWS_PARTITION,
        device: str = TARGET_DEVICE,
        efi_label: str = EFI_LABEL,
    ) -> MigrateResult:
        log = Logger.get("engine")
        args = [self.executable, image, partition, device, efi_label]
        log.debug(f"Engine: {args}, omitting {options.omit_tasks}")
        try:
            result = subprocess.run(
                args,
                input=options.model_dump_json(),
                text=True,
                check=False,
            )
        except OSError as e:
            raise EngineError(f"Cannot start engine {self.executable}: {e}") from e

        if result.returncode != 0:
            log.warning(f"Engine exited with status {result.returncode}")
            return MigrateResult.FAILED
        return MigrateResult.OK


def get_engine(name: str | None) -> MigrationEngine:
    """Return the engine for a configured executable.

    Raises:
        EngineError: If no engine is configured.
    """
    if not name:
        raise EngineError(
            "No migration engine configured; set MIGRATOR_ENGINE or 'engine' "
            "in the config file"
        )
    return CommandEngine(name)
