"""
inventory/types.py - 정규화된 엔티티 데이터클래스

파서가 생성하여 인벤토리 저장소에 업로드하는 엔티티입니다.
엔티티 간 참조는 lazy 참조(lazy_find 참고)이며, 저장소가 컬렉션 이름과
참조 키로 해석합니다.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


def lazy_find(collection: str, ref: str = "manager_ref", **reference: Any) -> dict[str, Any]:
    """Lazy reference to an entity of another collection

    Example:
        lazy_find("flavors", source_ref="t3.micro")
    """
    return {
        "inventory_collection_name": collection,
        "reference": reference,
        "ref": ref,
    }


class Entity:
    """엔티티 데이터클래스 mixin"""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass
class SourceRegion(Entity):
    """AWS region"""

    source_ref: str
    name: str
    endpoint: str = ""


@dataclass
class Subscription(Entity):
    """AWS account"""

    source_ref: str
    name: str
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Flavor(Entity):
    """EC2 instance type"""

    source_ref: str
    name: str
    cpus: int | None = None
    memory: int | None = None  # bytes
    disk_size: int | None = None  # bytes
    disk_count: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class OrchestrationStack(Entity):
    """CloudFormation stack"""

    source_ref: str
    name: str
    description: str | None = None
    status: str | None = None
    status_reason: str | None = None
    source_created_at: datetime | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None


@dataclass
class Vm(Entity):
    """EC2 instance"""

    source_ref: str
    uid_ems: str
    name: str
    power_state: str
    flavor: dict[str, Any] | None = None
    mac_addresses: list[str] = field(default_factory=list)
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    orchestration_stack: dict[str, Any] | None = None


@dataclass
class VmSecurityGroup(Entity):
    vm: dict[str, Any]
    security_group: dict[str, Any]


@dataclass
class TagLink(Entity):
    """리소스와 태그의 연결 (예: vm_tags 항목)"""

    resource_key: str
    resource: dict[str, Any]
    tag: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {self.resource_key: self.resource, "tag": self.tag}


@dataclass
class NetworkAdapter(Entity):
    """ENI (또는 EC2-Classic용 가상 어댑터)"""

    source_ref: str
    mac_address: str | None = None
    device: dict[str, Any] | None = None
    orchestration_stack: dict[str, Any] | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Ipaddress(Entity):
    source_ref: str
    ipaddress: str
    kind: str
    network_adapter: dict[str, Any] | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    subnet: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class FloatingIp(Entity):
    """Elastic IP"""

    source_ref: str
    ipaddress: str
    network_adapter: dict[str, Any] | None = None
    vm: dict[str, Any] | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Volume(Entity):
    """EBS volume"""

    source_ref: str
    name: str
    state: str
    size: int  # bytes
    volume_type: dict[str, Any] | None = None
    source_created_at: datetime | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class VolumeAttachment(Entity):
    volume: dict[str, Any]
    vm: dict[str, Any]
    device: str | None = None
    state: str | None = None


@dataclass
class Network(Entity):
    """VPC"""

    source_ref: str
    name: str
    cidr: str | None = None
    status: str | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    orchestration_stack: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Subnet(Entity):
    source_ref: str
    name: str
    cidr: str | None = None
    status: str | None = None
    network: dict[str, Any] | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    orchestration_stack: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class SecurityGroup(Entity):
    source_ref: str
    name: str
    description: str | None = None
    network: dict[str, Any] | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    orchestration_stack: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class VolumeType(Entity):
    """EBS volume type (gp3, io2, ...)"""

    source_ref: str
    name: str
    description: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ServiceOffering(Entity):
    """Service Catalog 상품"""

    source_ref: str
    name: str
    description: str | None = None
    source_created_at: datetime | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ServicePlan(Entity):
    """Service Catalog 상품의 provisioning artifact (버전)"""

    source_ref: str
    name: str
    description: str | None = None
    service_offering: dict[str, Any] | None = None
    source_created_at: datetime | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ServiceInstance(Entity):
    """프로비저닝된 Service Catalog 상품"""

    source_ref: str
    name: str
    service_offering: dict[str, Any] | None = None
    service_plan: dict[str, Any] | None = None
    source_created_at: datetime | None = None
    source_region: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
