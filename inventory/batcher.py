"""
inventory/batcher.py - 한도가 있는 엔티티 배처

처리 중인 엔티티 타입의 레코드 한도에 도달할 때까지 파싱된 엔티티를
이름별 컬렉션에 누적합니다. 엔진은 항상 배처 하나만 보유하며,
flush 시 컬렉션을 업로드로 넘기고 batcher.reset()으로 이어갑니다.

Example:
    batcher = EntityBatcher()
    for record in records:
        batcher.record()
        parse(batcher, record, scope)
        if batcher.size() >= limit:
            run.flush(batcher)
            batcher = batcher.reset()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Collection:
    """이름이 있는 추가 전용 엔티티 목록"""

    name: str
    data: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.data],
        }


class EntityBatcher:
    """flush 구간 하나의 컬렉션 작업 집합"""

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}
        self._records = 0

    def append(self, collection_name: str, entity: Any) -> None:
        """Append an entity to a collection, creating the collection on first use"""
        collection = self._collections.get(collection_name)
        if collection is None:
            collection = self._collections[collection_name] = Collection(collection_name)
        collection.data.append(entity)

    def record(self) -> int:
        """Count one consumed source record, returns the new count"""
        self._records += 1
        return self._records

    def size(self) -> int:
        """Source records consumed since the batcher was created"""
        return self._records

    def collection(self, name: str) -> Collection | None:
        return self._collections.get(name)

    @property
    def collections(self) -> list[Collection]:
        """Collections holding at least one entity, in creation order"""
        return [c for c in self._collections.values() if c.data]

    def touched(self) -> set[str]:
        """Names of the collections holding at least one entity"""
        return {c.name for c in self.collections}

    @property
    def is_empty(self) -> bool:
        return not self.collections

    def reset(self) -> EntityBatcher:
        """Fresh, empty batcher"""
        return EntityBatcher()

    def __repr__(self) -> str:
        counts = ", ".join(f"{c.name}={len(c)}" for c in self.collections)
        return f"EntityBatcher(records={self._records}, {counts or 'empty'})"
