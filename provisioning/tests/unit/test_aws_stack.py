"""Unit tests for the AWS stack."""

import json

import pytest
from cdktf import Testing
from cdktf_cdktf_provider_aws.data_aws_ami import DataAwsAmi
from cdktf_cdktf_provider_aws.instance import Instance
from cdktf_cdktf_provider_aws.route import Route
from cdktf_cdktf_provider_aws.subnet import Subnet
from cdktf_cdktf_provider_aws.vpc import Vpc

from engine.aws_stack import FlatAwsStack
from engine.graph import count_kinds, declared_outputs, declared_units
from models.config import AwsStackConfig


@pytest.fixture
def stack():
    """Create the AWS stack with default configuration."""
    app = Testing.app()
    return FlatAwsStack(app, "AwsStack")


@pytest.fixture
def synthesized(stack):
    """Synthesize the AWS stack to Terraform JSON."""
    return Testing.synth(stack)


def _provider(tf: dict, name: str) -> dict:
    block = tf["provider"][name]
    assert len(block) == 1
    return block[0]


class TestAwsNetworking:
    """Test networking resources."""

    def test_vpc(self, synthesized):
        """Test VPC address block and tags."""
        assert Testing.to_have_resource_with_properties(
            synthesized,
            Vpc.TF_RESOURCE_TYPE,
            {"cidr_block": "10.0.0.0/16", "tags": {"Name": "vpc_1"}},
        )

    def test_subnet_in_vpc(self, synthesized):
        """Test subnet references the VPC."""
        assert Testing.to_have_resource_with_properties(
            synthesized,
            Subnet.TF_RESOURCE_TYPE,
            {"cidr_block": "10.0.0.0/24", "vpc_id": "${aws_vpc.vpc_1.id}"},
        )

    def test_default_route(self, synthesized):
        """Test default route goes through the internet gateway."""
        assert Testing.to_have_resource_with_properties(
            synthesized,
            Route.TF_RESOURCE_TYPE,
            {
                "destination_cidr_block": "0.0.0.0/0",
                "gateway_id": "${aws_internet_gateway.igw.id}",
                "route_table_id": "${aws_route_table.rt.id}",
            },
        )

    def test_route_table_association(self, synthesized):
        """Test route table is associated with the subnet."""
        tf = json.loads(synthesized)
        association = tf["resource"]["aws_route_table_association"]["rt_association_vpc1"]

        assert association["route_table_id"] == "${aws_route_table.rt.id}"
        assert association["subnet_id"] == "${aws_subnet.subnet_1.id}"

    def test_provider_region(self, synthesized):
        """Test AWS provider region."""
        tf = json.loads(synthesized)

        assert _provider(tf, "aws")["region"] == "eu-south-1"

    def test_single_provider(self, synthesized):
        """Test exactly one AWS provider configuration."""
        tf = json.loads(synthesized)
        block = tf["provider"]["aws"]

        assert list(tf["provider"]) == ["aws"]
        assert isinstance(block, list)
        assert len(block) == 1


class TestAwsCompute:
    """Test image lookup, security group and instance."""

    def test_ami_lookup(self, synthesized):
        """Test AMI lookup filters."""
        assert Testing.to_have_data_source_with_properties(
            synthesized,
            DataAwsAmi.TF_RESOURCE_TYPE,
            {"most_recent": True, "owners": ["amazon"]},
        )

        tf = json.loads(synthesized)
        ami_filter = tf["data"]["aws_ami"]["aws_ami"]["filter"]
        assert ami_filter == [{"name": "name", "values": ["amzn2-ami-kernel-5*"]}]

    def test_security_group_allows_ssh(self, synthesized):
        """Test security group ingress on port 22."""
        tf = json.loads(synthesized)
        sg = tf["resource"]["aws_security_group"]["sg"]

        assert sg["name"] == "sg_allow_ssh"
        assert sg["vpc_id"] == "${aws_vpc.vpc_1.id}"
        assert len(sg["ingress"]) == 1

        ingress = sg["ingress"][0]
        assert ingress["description"] == "ssh"
        assert ingress["protocol"] == "tcp"
        assert ingress["from_port"] == 22
        assert ingress["to_port"] == 22

    def test_instance(self, synthesized):
        """Test instance wiring."""
        assert Testing.to_have_resource_with_properties(
            synthesized,
            Instance.TF_RESOURCE_TYPE,
            {
                "ami": "${data.aws_ami.aws_ami.id}",
                "associate_public_ip_address": True,
                "subnet_id": "${aws_subnet.subnet_1.id}",
                "instance_type": "t3.micro",
                "vpc_security_group_ids": ["${aws_security_group.sg.id}"],
                "tags": {"Name": "ec2_1"},
            },
        )

    def test_user_data(self, synthesized):
        """Test startup script."""
        tf = json.loads(synthesized)
        user_data = tf["resource"]["aws_instance"]["ec2_1"]["user_data"]

        assert "sudo yum update -y" in user_data
        assert "sudo touch /home/ec2-user/USERDATA_EXECUTED" in user_data


class TestAwsOutputs:
    """Test outputs of the AWS stack."""

    def test_single_public_ip_output(self, stack, synthesized):
        """Test the only output is the instance public IP."""
        tf = json.loads(synthesized)

        assert declared_outputs(stack) == ["public_ip"]
        assert list(tf["output"]) == ["public_ip"]
        assert tf["output"]["public_ip"]["value"] == "${aws_instance.ec2_1.public_ip}"
        assert tf["output"]["public_ip"]["description"] == "EC2 Public IP"


class TestAwsGraph:
    """Test the declared unit graph."""

    def test_unit_counts(self, stack):
        """Test one unit of each kind."""
        assert count_kinds(stack) == {
            "network": 1,
            "subnet": 1,
            "internet-gateway": 1,
            "route-table": 1,
            "route-table-association": 1,
            "route": 1,
            "compute-image-lookup": 1,
            "security-group": 1,
            "compute-instance": 1,
        }

    def test_construction_order(self, stack):
        """Test units are declared in dependency order."""
        names = [unit.name for unit in declared_units(stack)]

        assert names == [
            "vpc_1",
            "subnet_1",
            "igw",
            "rt",
            "rt_association_vpc1",
            "route_igw",
            "aws_ami",
            "sg",
            "ec2_1",
        ]

    def test_instance_attributes(self, stack):
        """Test units are kept on the stack."""
        assert stack.region == "eu-south-1"
        assert stack.vpc.node.id == "vpc_1"
        assert stack.ec2.node.id == "ec2_1"


class TestAwsCustomConfig:
    """Test configuration overrides."""

    def test_region_and_instance_type(self):
        """Test overridden literals reach the manifest."""
        app = Testing.app()
        config = AwsStackConfig(region="us-east-1", instance_type="t3.small", ssh_port=2222)
        stack = FlatAwsStack(app, "AwsStack", config)

        tf = json.loads(Testing.synth(stack))

        assert _provider(tf, "aws")["region"] == "us-east-1"
        assert tf["resource"]["aws_instance"]["ec2_1"]["instance_type"] == "t3.small"
        assert tf["resource"]["aws_security_group"]["sg"]["ingress"][0]["from_port"] == 2222


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
