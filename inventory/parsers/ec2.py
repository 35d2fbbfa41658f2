"""
inventory/parsers/ec2.py - EC2 레코드 파서

각 파서는 EC2 원시 레코드 하나를 받아 정규화된 엔티티를 배처에 추가합니다.
레코드 하나가 여러 컬렉션으로 나뉠 수 있습니다 (인스턴스는 vm_security_groups,
vm_tags, EC2-Classic이면 network_adapters와 ipaddresses도 생성).
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..scope import Scope
from ..types import (
    Flavor,
    FloatingIp,
    Ipaddress,
    Network,
    NetworkAdapter,
    SecurityGroup,
    SourceRegion,
    Subnet,
    Vm,
    VmSecurityGroup,
    Volume,
    VolumeAttachment,
    lazy_find,
)
from .helpers import name_from_tags, parse_tags, stack_from_tags

GIB = 1024**3
MIB = 1024**2

POWER_STATES = {
    "pending": "suspended",
    "running": "on",
    "shutting-down": "powering_down",
    "shutting_down": "powering_down",
    "stopping": "powering_down",
    "terminated": "terminated",
    "stopped": "off",
}


def parse_vm_power_state(state: dict[str, Any] | None) -> str:
    return POWER_STATES.get((state or {}).get("Name", ""), "unknown")


# =============================================================================
# VMs
# =============================================================================


def parse_vms(batcher: EntityBatcher, instance: dict[str, Any], scope: Scope) -> None:
    uid = instance["InstanceId"]
    tags = instance.get("Tags")
    instance_type = instance.get("InstanceType")

    vm = Vm(
        source_ref=uid,
        uid_ems=uid,
        name=name_from_tags(tags, uid),
        power_state=parse_vm_power_state(instance.get("State")),
        flavor=lazy_find("flavors", source_ref=instance_type) if instance_type else None,
        mac_addresses=parse_network(instance)["mac_addresses"],
        source_region=scope.source_region,
        subscription=scope.subscription,
        orchestration_stack=stack_from_tags(tags),
    )

    batcher.append("vms", vm)
    parse_vm_security_groups(batcher, instance)
    parse_tags(batcher, "vms", "vm", uid, tags)
    ec2_classic_network_adapters_and_ips(batcher, instance, scope)


def parse_network(instance: dict[str, Any]) -> dict[str, Any]:
    network: dict[str, Any] = {
        "fqdn": instance.get("PublicDnsName"),
        "private_ip_address": instance.get("PrivateIpAddress"),
        "public_ip_address": instance.get("PublicIpAddress"),
        "mac_addresses": [],
        "private_ip_addresses": [],
        "public_ip_addresses": [],
    }

    for interface in instance.get("NetworkInterfaces") or []:
        if interface.get("MacAddress"):
            network["mac_addresses"].append(interface["MacAddress"])
        for private_ip in interface.get("PrivateIpAddresses") or []:
            network["private_ip_addresses"].append(private_ip.get("PrivateIpAddress"))
            public_ip = (private_ip.get("Association") or {}).get("PublicIp")
            if public_ip:
                network["public_ip_addresses"].append(public_ip)

    return network


def parse_vm_security_groups(batcher: EntityBatcher, instance: dict[str, Any]) -> None:
    for sg in instance.get("SecurityGroups") or []:
        batcher.append(
            "vm_security_groups",
            VmSecurityGroup(
                vm=lazy_find("vms", source_ref=instance["InstanceId"]),
                security_group=lazy_find("security_groups", source_ref=sg["GroupId"]),
            ),
        )


def ec2_classic_network_adapters_and_ips(batcher: EntityBatcher, instance: dict[str, Any], scope: Scope) -> None:
    """Synthetic adapter and addresses of an instance outside any VPC"""
    if instance.get("VpcId"):
        return

    instance_id = instance["InstanceId"]
    adapter_ref = lazy_find("network_adapters", source_ref=instance_id)
    private_ip = instance.get("PrivateIpAddress")
    public_ip = instance.get("PublicIpAddress")

    batcher.append(
        "network_adapters",
        NetworkAdapter(
            source_ref=instance_id,
            device=lazy_find("vms", source_ref=instance_id),
            source_region=scope.source_region,
        ),
    )

    if private_ip:
        batcher.append(
            "ipaddresses",
            Ipaddress(
                source_ref=f"{instance_id}______{private_ip}",
                ipaddress=private_ip,
                kind="private",
                network_adapter=adapter_ref,
                source_region=scope.source_region,
                extra={
                    "primary": True,
                    "private_dns_name": instance.get("PrivateDnsName"),
                },
            ),
        )

    if public_ip:
        batcher.append(
            "ipaddresses",
            Ipaddress(
                source_ref=public_ip,
                ipaddress=public_ip,
                kind="public",
                network_adapter=adapter_ref,
                source_region=scope.source_region,
                extra={"private_ip_address": private_ip},
            ),
        )


# =============================================================================
# Network adapters / floating IPs
# =============================================================================


def parse_network_adapters(batcher: EntityBatcher, interface: dict[str, Any], scope: Scope) -> None:
    eni_id = interface["NetworkInterfaceId"]
    tags = interface.get("TagSet")
    attachment = interface.get("Attachment") or {}
    instance_id = attachment.get("InstanceId")
    adapter_ref = lazy_find("network_adapters", source_ref=eni_id)
    subnet_id = interface.get("SubnetId")

    batcher.append(
        "network_adapters",
        NetworkAdapter(
            source_ref=eni_id,
            mac_address=interface.get("MacAddress"),
            device=lazy_find("vms", source_ref=instance_id) if instance_id else None,
            orchestration_stack=stack_from_tags(tags),
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "description": interface.get("Description"),
                "interface_type": interface.get("InterfaceType"),
                "status": interface.get("Status"),
                "attachment_status": attachment.get("Status"),
                "device_index": attachment.get("DeviceIndex"),
            },
        ),
    )

    for private in interface.get("PrivateIpAddresses") or []:
        private_ip = private.get("PrivateIpAddress")
        if not private_ip:
            continue
        batcher.append(
            "ipaddresses",
            Ipaddress(
                source_ref=f"{eni_id}___{private_ip}",
                ipaddress=private_ip,
                kind="private",
                network_adapter=adapter_ref,
                source_region=scope.source_region,
                subscription=scope.subscription,
                subnet=lazy_find("subnets", source_ref=subnet_id) if subnet_id else None,
                extra={
                    "primary": private.get("Primary", False),
                    "private_dns_name": private.get("PrivateDnsName"),
                },
            ),
        )

        association = private.get("Association") or {}
        public_ip = association.get("PublicIp")
        if public_ip:
            batcher.append(
                "ipaddresses",
                Ipaddress(
                    source_ref=public_ip,
                    ipaddress=public_ip,
                    kind="public",
                    network_adapter=adapter_ref,
                    source_region=scope.source_region,
                    subscription=scope.subscription,
                    extra={
                        "private_ip_address": private_ip,
                        "public_dns_name": association.get("PublicDnsName"),
                    },
                ),
            )

    parse_tags(batcher, "network_adapters", "network_adapter", eni_id, tags)


def parse_floating_ips(batcher: EntityBatcher, address: dict[str, Any], scope: Scope) -> None:
    public_ip = address["PublicIp"]
    eni_id = address.get("NetworkInterfaceId")
    instance_id = address.get("InstanceId")

    batcher.append(
        "floating_ips",
        FloatingIp(
            source_ref=address.get("AllocationId") or public_ip,
            ipaddress=public_ip,
            network_adapter=lazy_find("network_adapters", source_ref=eni_id) if eni_id else None,
            vm=lazy_find("vms", source_ref=instance_id) if instance_id else None,
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "domain": address.get("Domain"),
                "association_id": address.get("AssociationId"),
                "private_ip_address": address.get("PrivateIpAddress"),
            },
        ),
    )


# =============================================================================
# Storage / networking
# =============================================================================


def parse_volumes(batcher: EntityBatcher, volume: dict[str, Any], scope: Scope) -> None:
    volume_id = volume["VolumeId"]
    tags = volume.get("Tags")
    volume_type = volume.get("VolumeType")

    batcher.append(
        "volumes",
        Volume(
            source_ref=volume_id,
            name=name_from_tags(tags, volume_id),
            state=volume.get("State", "unknown"),
            size=(volume.get("Size") or 0) * GIB,
            volume_type=lazy_find("volume_types", source_ref=volume_type) if volume_type else None,
            source_created_at=volume.get("CreateTime"),
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "availability_zone": volume.get("AvailabilityZone"),
                "encrypted": volume.get("Encrypted", False),
                "iops": volume.get("Iops"),
                "snapshot_id": volume.get("SnapshotId"),
            },
        ),
    )

    for attachment in volume.get("Attachments") or []:
        instance_id = attachment.get("InstanceId")
        if not instance_id:
            continue
        batcher.append(
            "volume_attachments",
            VolumeAttachment(
                volume=lazy_find("volumes", source_ref=volume_id),
                vm=lazy_find("vms", source_ref=instance_id),
                device=attachment.get("Device"),
                state=attachment.get("State"),
            ),
        )

    parse_tags(batcher, "volumes", "volume", volume_id, tags)


def parse_networks(batcher: EntityBatcher, vpc: dict[str, Any], scope: Scope) -> None:
    vpc_id = vpc["VpcId"]
    tags = vpc.get("Tags")

    batcher.append(
        "networks",
        Network(
            source_ref=vpc_id,
            name=name_from_tags(tags, vpc_id),
            cidr=vpc.get("CidrBlock"),
            status="active" if vpc.get("State") == "available" else "inactive",
            source_region=scope.source_region,
            subscription=scope.subscription,
            orchestration_stack=stack_from_tags(tags),
            extra={
                "is_default": vpc.get("IsDefault", False),
                "instance_tenancy": vpc.get("InstanceTenancy"),
                "dhcp_options_id": vpc.get("DhcpOptionsId"),
            },
        ),
    )
    parse_tags(batcher, "networks", "network", vpc_id, tags)


def parse_subnets(batcher: EntityBatcher, subnet: dict[str, Any], scope: Scope) -> None:
    subnet_id = subnet["SubnetId"]
    tags = subnet.get("Tags")
    vpc_id = subnet.get("VpcId")

    batcher.append(
        "subnets",
        Subnet(
            source_ref=subnet_id,
            name=name_from_tags(tags, subnet_id),
            cidr=subnet.get("CidrBlock"),
            status="active" if subnet.get("State") == "available" else "inactive",
            network=lazy_find("networks", source_ref=vpc_id) if vpc_id else None,
            source_region=scope.source_region,
            subscription=scope.subscription,
            orchestration_stack=stack_from_tags(tags),
            extra={
                "availability_zone": subnet.get("AvailabilityZone"),
                "available_ip_address_count": subnet.get("AvailableIpAddressCount"),
                "map_public_ip_on_launch": subnet.get("MapPublicIpOnLaunch", False),
            },
        ),
    )
    parse_tags(batcher, "subnets", "subnet", subnet_id, tags)


def parse_security_groups(batcher: EntityBatcher, group: dict[str, Any], scope: Scope) -> None:
    group_id = group["GroupId"]
    tags = group.get("Tags")
    vpc_id = group.get("VpcId")

    batcher.append(
        "security_groups",
        SecurityGroup(
            source_ref=group_id,
            name=group.get("GroupName", group_id),
            description=group.get("Description"),
            network=lazy_find("networks", source_ref=vpc_id) if vpc_id else None,
            source_region=scope.source_region,
            subscription=scope.subscription,
            orchestration_stack=stack_from_tags(tags),
            extra={
                "ip_permissions": group.get("IpPermissions", []),
                "ip_permissions_egress": group.get("IpPermissionsEgress", []),
            },
        ),
    )
    parse_tags(batcher, "security_groups", "security_group", group_id, tags)


# =============================================================================
# Global listings
# =============================================================================


def parse_source_regions(batcher: EntityBatcher, region: dict[str, Any], scope: Scope) -> None:
    batcher.append(
        "source_regions",
        SourceRegion(
            source_ref=region["RegionName"],
            name=region["RegionName"],
            endpoint=region.get("Endpoint", ""),
        ),
    )


def parse_flavors(batcher: EntityBatcher, instance_type: dict[str, Any], scope: Scope) -> None:
    name = instance_type["InstanceType"]
    storage = instance_type.get("InstanceStorageInfo") or {}
    disks = storage.get("Disks") or []
    memory_mib = (instance_type.get("MemoryInfo") or {}).get("SizeInMiB")
    total_gb = storage.get("TotalSizeInGB")

    batcher.append(
        "flavors",
        Flavor(
            source_ref=name,
            name=name,
            cpus=(instance_type.get("VCpuInfo") or {}).get("DefaultVCpus"),
            memory=memory_mib * MIB if memory_mib is not None else None,
            disk_size=total_gb * GIB if total_gb is not None else None,
            disk_count=sum(d.get("Count", 0) for d in disks) if disks else None,
            extra={
                "current_generation": instance_type.get("CurrentGeneration"),
                "hypervisor": instance_type.get("Hypervisor"),
                "architectures": (instance_type.get("ProcessorInfo") or {}).get("SupportedArchitectures", []),
            },
        ),
    )
