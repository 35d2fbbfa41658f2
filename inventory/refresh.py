"""
inventory/refresh.py - Refresh run과 part

refresh run은 최상위 엔티티 타입(및 연관 타입)을 모든 scope에 대해 한 번
수집하는 단위입니다. run 안의 flush 하나가 part이며, part는 run의
refresh_state_uuid와 자체 refresh_state_part_uuid를 가집니다.
run은 업로더가 보고한 part 수와 다룬 컬렉션 이름(sweep scope)을 누적합니다.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from core.exceptions import RunStateError

from .batcher import Collection, EntityBatcher

logger = logging.getLogger(__name__)


class InventoryUploader(Protocol):
    """인벤토리 저장소에 part와 sweep을 기록하는 업로더"""

    def save_inventory(
        self,
        collections: list[Collection],
        inventory_name: str,
        schema_name: str,
        refresh_state_uuid: str,
        refresh_state_part_uuid: str,
    ) -> int:
        """Upload collections, returns the number of parts written"""
        ...

    def sweep_inventory(
        self,
        inventory_name: str,
        schema_name: str,
        refresh_state_uuid: str,
        total_parts: int,
        sweep_scope: list[str],
    ) -> None:
        """Deactivate records of sweep_scope not refreshed by this run's parts"""
        ...


def new_uuid() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Part:
    """run의 flush 1회

    Attributes:
        refresh_state_part_uuid: part id handed to the uploader
        ordinal: 1-based flush number within the run
        parts_written: parts the uploader reports (it may split further)
        collections: names of the uploaded collections
    """

    refresh_state_part_uuid: str
    ordinal: int
    parts_written: int
    collections: frozenset[str]


@dataclass
class RefreshRun:
    """run 하나의 누적 상태

    Attributes:
        entity_type: top-level entity type of the run
        refresh_state_uuid: run id
        total_parts: sum of parts_written over all flushes
        sweep_scope: collection names to sweep
        parts: flushes done so far
        swept: True once the sweep was issued; the run accepts no more parts
    """

    entity_type: str
    refresh_state_uuid: str = field(default_factory=new_uuid)
    total_parts: int = 0
    sweep_scope: set[str] = field(default_factory=set)
    parts: list[Part] = field(default_factory=list)
    swept: bool = False

    @property
    def part_count(self) -> int:
        return len(self.parts)

    def flush(
        self,
        batcher: EntityBatcher,
        uploader: InventoryUploader,
        inventory_name: str,
        schema_name: str,
    ) -> Part | None:
        """Upload the batcher's collections as the next part

        Empty batchers upload nothing and return None.

        Raises:
            RunStateError: the run was already swept
        """
        if self.swept:
            raise RunStateError(self.refresh_state_uuid, "cannot save parts after the sweep")

        collections = batcher.collections
        if not collections:
            return None

        part_uuid = new_uuid()
        parts_written = uploader.save_inventory(
            collections,
            inventory_name,
            schema_name,
            self.refresh_state_uuid,
            part_uuid,
        )

        part = Part(
            refresh_state_part_uuid=part_uuid,
            ordinal=self.part_count + 1,
            parts_written=parts_written,
            collections=frozenset(batcher.touched()),
        )
        self.parts.append(part)
        self.total_parts += parts_written
        self.sweep_scope |= part.collections

        logger.debug(
            "Saved part %d of %s (%s) - %d written",
            part.ordinal,
            self.entity_type,
            self.refresh_state_uuid,
            parts_written,
        )
        return part


class RunAllocator:
    """refresh run 발급기

    The sweep scope of a new run is seeded with the primary collections of
    the top-level type and of its related types, so a related collection is
    swept even when no scope produced records for it.
    """

    def begin_run(self, entity_type: str, seed_collections: Iterable[str] = ()) -> RefreshRun:
        run = RefreshRun(entity_type=str(entity_type))
        run.sweep_scope.update(seed_collections)
        return run
