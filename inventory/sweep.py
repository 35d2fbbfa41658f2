"""
inventory/sweep.py - Sweep 코디네이터

refresh run을 마무리합니다. run이 다룬 컬렉션과 기록한 part 수를 인벤토리
저장소에 알려, 해당 part로 갱신되지 않은 레코드가 비활성화되도록 합니다.
sweep은 run의 마지막 호출이며, 이후 run은 추가 part를 거부합니다.
"""

from __future__ import annotations

import logging

from core.exceptions import RunStateError

from .refresh import InventoryUploader, RefreshRun

logger = logging.getLogger(__name__)


class SweepCoordinator:
    """완료된 run의 sweep 호출"""

    def __init__(self, uploader: InventoryUploader, inventory_name: str, schema_name: str):
        self.uploader = uploader
        self.inventory_name = inventory_name
        self.schema_name = schema_name

    def sweep(self, run: RefreshRun) -> bool:
        """Sweep a finished run

        Runs without parts are skipped, there is nothing to reconcile.

        Returns:
            True if the sweep was sent

        Raises:
            RunStateError: the run was already swept
        """
        if run.swept:
            raise RunStateError(run.refresh_state_uuid, "already swept")

        if run.total_parts == 0:
            logger.info(
                "Nothing collected for %s with :refresh_state_uuid => '%s', skipping sweep",
                run.entity_type,
                run.refresh_state_uuid,
            )
            return False

        sweep_scope = sorted(run.sweep_scope)
        logger.info(
            "Sweeping inactive records for %s with :refresh_state_uuid => '%s'...",
            sweep_scope,
            run.refresh_state_uuid,
        )

        self.uploader.sweep_inventory(
            self.inventory_name,
            self.schema_name,
            run.refresh_state_uuid,
            run.total_parts,
            sweep_scope,
        )
        run.swept = True

        logger.info(
            "Sweeping inactive records for %s with :refresh_state_uuid => '%s'...Complete",
            sweep_scope,
            run.refresh_state_uuid,
        )
        return True
