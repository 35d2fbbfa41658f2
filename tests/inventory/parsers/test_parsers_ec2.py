"""
tests/inventory/parsers/test_parsers_ec2.py - inventory/parsers 테스트
"""

from datetime import datetime, timezone

import pytest

from inventory.batcher import EntityBatcher
from inventory.parsers import cloudformation, ec2, organizations
from inventory.parsers.helpers import get_from_tags, name_from_tags, parse_tags, stack_from_tags
from inventory.scope import Scope

SCOPE = Scope("us-east-1", "111111111111", master=True)
STACK_ID = "arn:aws:cloudformation:us-east-1:111111111111:stack/web/abc"


def _instance(**overrides):
    instance = {
        "InstanceId": "i-1",
        "InstanceType": "t3.micro",
        "State": {"Name": "running"},
        "VpcId": "vpc-1",
        "PrivateIpAddress": "10.0.0.5",
        "Tags": [
            {"Key": "Name", "Value": "web-1"},
            {"Key": "env", "Value": "prod"},
            {"Key": "aws:cloudformation:stack-id", "Value": STACK_ID},
        ],
        "SecurityGroups": [{"GroupId": "sg-1", "GroupName": "web"}],
        "NetworkInterfaces": [
            {
                "MacAddress": "0a:00:00:00:00:01",
                "PrivateIpAddresses": [
                    {"PrivateIpAddress": "10.0.0.5", "Association": {"PublicIp": "54.0.0.1"}},
                ],
            }
        ],
    }
    instance.update(overrides)
    return instance


def _data(batcher, name):
    collection = batcher.collection(name)
    return collection.data if collection else []


class TestTagHelpers:
    def test_get_from_tags_case_insensitive(self):
        assert get_from_tags([{"Key": "NAME", "Value": "x"}], "name") == "x"
        assert get_from_tags(None, "name") is None

    def test_name_falls_back(self):
        assert name_from_tags([], "i-1") == "i-1"

    def test_stack_reference(self):
        ref = stack_from_tags([{"Key": "aws:cloudformation:stack-id", "Value": STACK_ID}])
        assert ref["inventory_collection_name"] == "orchestration_stacks"
        assert ref["reference"] == {"source_ref": STACK_ID}

    def test_parse_tags_skips_aws_namespace(self):
        batcher = EntityBatcher()
        parse_tags(batcher, "vms", "vm", "i-1", [{"Key": "env", "Value": "prod"}, {"Key": "aws:x", "Value": "y"}])

        links = _data(batcher, "vm_tags")
        assert len(links) == 1
        assert links[0].to_dict() == {
            "vm": {"inventory_collection_name": "vms", "reference": {"source_ref": "i-1"}, "ref": "manager_ref"},
            "tag": {
                "inventory_collection_name": "tags",
                "reference": {"name": "env", "value": "prod", "namespace": "amazon"},
                "ref": "manager_ref",
            },
        }
        assert batcher.collection("tags") is None


class TestParseVms:
    """인스턴스 파싱 테스트"""

    @pytest.mark.parametrize(
        "state,expected",
        [
            ("pending", "suspended"),
            ("running", "on"),
            ("shutting-down", "powering_down"),
            ("stopping", "powering_down"),
            ("terminated", "terminated"),
            ("stopped", "off"),
            ("rebooting", "unknown"),
        ],
    )
    def test_power_state(self, state, expected):
        assert ec2.parse_vm_power_state({"Name": state}) == expected

    def test_vm_fields(self):
        batcher = EntityBatcher()
        ec2.parse_vms(batcher, _instance(), SCOPE)

        vm = _data(batcher, "vms")[0]
        assert vm.source_ref == vm.uid_ems == "i-1"
        assert vm.name == "web-1"
        assert vm.power_state == "on"
        assert vm.flavor["reference"] == {"source_ref": "t3.micro"}
        assert vm.orchestration_stack["reference"] == {"source_ref": STACK_ID}
        assert vm.mac_addresses == ["0a:00:00:00:00:01"]
        assert vm.source_region["reference"] == {"source_ref": "us-east-1"}
        assert vm.subscription["reference"] == {"source_ref": "111111111111"}

    def test_security_groups_and_tags(self):
        batcher = EntityBatcher()
        ec2.parse_vms(batcher, _instance(), SCOPE)

        assert _data(batcher, "vm_security_groups")[0].security_group["reference"] == {"source_ref": "sg-1"}
        assert len(_data(batcher, "vm_tags")) == 2

    def test_vpc_instance_has_no_synthetic_adapter(self):
        batcher = EntityBatcher()
        ec2.parse_vms(batcher, _instance(), SCOPE)

        assert batcher.collection("network_adapters") is None
        assert batcher.collection("ipaddresses") is None

    def test_ec2_classic_adapter_and_ips(self):
        batcher = EntityBatcher()
        ec2.parse_vms(batcher, _instance(VpcId=None, PublicIpAddress="54.0.0.9", PrivateDnsName="ip-10"), SCOPE)

        adapter = _data(batcher, "network_adapters")[0]
        assert adapter.source_ref == "i-1"
        assert adapter.device["reference"] == {"source_ref": "i-1"}

        private, public = _data(batcher, "ipaddresses")
        assert private.source_ref == "i-1______10.0.0.5"
        assert private.kind == "private"
        assert private.extra == {"primary": True, "private_dns_name": "ip-10"}
        assert public.source_ref == public.ipaddress == "54.0.0.9"
        assert public.kind == "public"

    def test_name_defaults_to_id(self):
        batcher = EntityBatcher()
        ec2.parse_vms(batcher, _instance(Tags=[]), SCOPE)

        assert _data(batcher, "vms")[0].name == "i-1"


class TestParseNetworking:
    def test_network_adapter_with_addresses(self):
        batcher = EntityBatcher()
        interface = {
            "NetworkInterfaceId": "eni-1",
            "MacAddress": "0a:00:00:00:00:02",
            "SubnetId": "subnet-1",
            "Attachment": {"InstanceId": "i-1", "Status": "attached", "DeviceIndex": 0},
            "PrivateIpAddresses": [
                {"PrivateIpAddress": "10.0.0.6", "Primary": True, "Association": {"PublicIp": "54.0.0.2"}},
                {"PrivateIpAddress": "10.0.0.7", "Primary": False},
            ],
            "TagSet": [{"Key": "team", "Value": "a"}],
        }

        ec2.parse_network_adapters(batcher, interface, SCOPE)

        adapter = _data(batcher, "network_adapters")[0]
        assert adapter.device["reference"] == {"source_ref": "i-1"}
        kinds = [(ip.kind, ip.ipaddress) for ip in _data(batcher, "ipaddresses")]
        assert kinds == [("private", "10.0.0.6"), ("public", "54.0.0.2"), ("private", "10.0.0.7")]
        assert _data(batcher, "ipaddresses")[0].subnet["reference"] == {"source_ref": "subnet-1"}
        assert len(_data(batcher, "network_adapter_tags")) == 1

    def test_floating_ip(self):
        batcher = EntityBatcher()
        ec2.parse_floating_ips(
            batcher,
            {"PublicIp": "54.0.0.3", "AllocationId": "eipalloc-1", "InstanceId": "i-1", "NetworkInterfaceId": "eni-1"},
            SCOPE,
        )

        eip = _data(batcher, "floating_ips")[0]
        assert eip.source_ref == "eipalloc-1"
        assert eip.vm["reference"] == {"source_ref": "i-1"}
        assert eip.network_adapter["reference"] == {"source_ref": "eni-1"}

    def test_classic_floating_ip_keyed_by_address(self):
        batcher = EntityBatcher()
        ec2.parse_floating_ips(batcher, {"PublicIp": "54.0.0.4"}, SCOPE)

        eip = _data(batcher, "floating_ips")[0]
        assert eip.source_ref == "54.0.0.4"
        assert eip.vm is None

    def test_network_status(self):
        batcher = EntityBatcher()
        ec2.parse_networks(batcher, {"VpcId": "vpc-1", "State": "available", "CidrBlock": "10.0.0.0/16"}, SCOPE)
        ec2.parse_networks(batcher, {"VpcId": "vpc-2", "State": "pending"}, SCOPE)

        assert [n.status for n in _data(batcher, "networks")] == ["active", "inactive"]

    def test_subnet_references_network(self):
        batcher = EntityBatcher()
        ec2.parse_subnets(batcher, {"SubnetId": "subnet-1", "VpcId": "vpc-1", "State": "available"}, SCOPE)

        assert _data(batcher, "subnets")[0].network["reference"] == {"source_ref": "vpc-1"}

    def test_security_group_rules_kept(self):
        batcher = EntityBatcher()
        rules = [{"IpProtocol": "tcp", "FromPort": 443, "ToPort": 443}]
        ec2.parse_security_groups(
            batcher, {"GroupId": "sg-1", "GroupName": "web", "VpcId": "vpc-1", "IpPermissions": rules}, SCOPE
        )

        group = _data(batcher, "security_groups")[0]
        assert group.name == "web"
        assert group.extra["ip_permissions"] == rules


class TestParseStorageAndGlobals:
    def test_volume_size_in_bytes_with_attachments(self):
        batcher = EntityBatcher()
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        ec2.parse_volumes(
            batcher,
            {
                "VolumeId": "vol-1",
                "Size": 8,
                "State": "in-use",
                "VolumeType": "gp3",
                "CreateTime": created,
                "Attachments": [{"InstanceId": "i-1", "Device": "/dev/xvda", "State": "attached"}],
            },
            SCOPE,
        )

        volume = _data(batcher, "volumes")[0]
        assert volume.size == 8 * 1024**3
        assert volume.volume_type["reference"] == {"source_ref": "gp3"}
        assert volume.source_created_at == created
        attachment = _data(batcher, "volume_attachments")[0]
        assert attachment.vm["reference"] == {"source_ref": "i-1"}
        assert attachment.device == "/dev/xvda"

    def test_flavor(self):
        batcher = EntityBatcher()
        ec2.parse_flavors(
            batcher,
            {
                "InstanceType": "m5d.large",
                "VCpuInfo": {"DefaultVCpus": 2},
                "MemoryInfo": {"SizeInMiB": 8192},
                "InstanceStorageInfo": {"TotalSizeInGB": 75, "Disks": [{"SizeInGB": 75, "Count": 1}]},
            },
            SCOPE,
        )

        flavor = _data(batcher, "flavors")[0]
        assert flavor.cpus == 2
        assert flavor.memory == 8192 * 1024**2
        assert flavor.disk_size == 75 * 1024**3
        assert flavor.disk_count == 1

    def test_source_region(self):
        batcher = EntityBatcher()
        ec2.parse_source_regions(batcher, {"RegionName": "eu-west-1", "Endpoint": "ec2.eu-west-1.amazonaws.com"}, SCOPE)

        assert _data(batcher, "source_regions")[0].to_dict() == {
            "source_ref": "eu-west-1",
            "name": "eu-west-1",
            "endpoint": "ec2.eu-west-1.amazonaws.com",
        }

    def test_subscription_marks_master(self):
        batcher = EntityBatcher()
        organizations.parse_subscriptions(batcher, {"Id": "111111111111", "Name": "main"}, SCOPE)
        organizations.parse_subscriptions(batcher, {"Id": "222222222222"}, SCOPE)

        master, member = _data(batcher, "subscriptions")
        assert master.extra["master"] is True
        assert member.name == "222222222222"
        assert member.extra["master"] is False

    def test_orchestration_stack(self):
        batcher = EntityBatcher()
        cloudformation.parse_orchestration_stacks(
            batcher,
            {"StackId": STACK_ID, "StackName": "web", "StackStatus": "CREATE_COMPLETE", "Tags": [{"Key": "a", "Value": "b"}]},
            SCOPE,
        )

        stack = _data(batcher, "orchestration_stacks")[0]
        assert stack.source_ref == STACK_ID
        assert stack.status == "CREATE_COMPLETE"
        assert len(_data(batcher, "orchestration_stack_tags")) == 1
