"""AWS VPC and EC2 stack using CDKTF."""

from typing import Optional

from cdktf import TerraformStack, TerraformOutput
from constructs import Construct

# AWS Provider imports
from cdktf_cdktf_provider_aws.provider import AwsProvider
from cdktf_cdktf_provider_aws.vpc import Vpc
from cdktf_cdktf_provider_aws.subnet import Subnet
from cdktf_cdktf_provider_aws.internet_gateway import InternetGateway
from cdktf_cdktf_provider_aws.route_table import RouteTable
from cdktf_cdktf_provider_aws.route_table_association import RouteTableAssociation
from cdktf_cdktf_provider_aws.route import Route
from cdktf_cdktf_provider_aws.data_aws_ami import DataAwsAmi, DataAwsAmiFilter
from cdktf_cdktf_provider_aws.security_group import SecurityGroup, SecurityGroupIngress
from cdktf_cdktf_provider_aws.instance import Instance

from models.config import AwsStackConfig


class FlatAwsStack(TerraformStack):
    """
    Single-region AWS stack.

    Creates:
    - VPC with one subnet
    - Internet gateway, route table and default route
    - Security group allowing SSH
    - EC2 instance from the latest Amazon Linux 2 AMI
    """

    def __init__(self, scope: Construct, id: str, config: Optional[AwsStackConfig] = None):
        """
        Initialize AWS stack.

        Args:
            scope: CDKTF construct scope
            id: Stack identifier
            config: Stack configuration, defaults to AwsStackConfig()
        """
        super().__init__(scope, id)

        self.config = config or AwsStackConfig()
        self.region = self.config.region

        # Configure the AWS provider
        AwsProvider(self, "AWS", region=self.region)

        # Networking
        self.vpc = self._create_vpc()
        self.subnet = self._create_subnet()
        self.igw = self._create_internet_gateway()
        self.rt = self._create_route_table()
        self.rt_association = self._create_route_table_association()
        self.route_igw = self._create_default_route()

        # Compute
        self.aws_ami = self._lookup_ami()
        self.sg = self._create_security_group()
        self.ec2 = self._create_instance()

        self.public_ip = self._create_outputs()

    def _create_vpc(self) -> Vpc:
        """Create VPC."""
        return Vpc(
            self,
            "vpc_1",
            cidr_block=self.config.vpc_cidr,
            tags={"Name": "vpc_1"},
        )

    def _create_subnet(self) -> Subnet:
        """Create subnet inside the VPC."""
        return Subnet(
            self,
            "subnet_1",
            cidr_block=self.config.subnet_cidr,
            vpc_id=self.vpc.id,
            tags={"Name": "subnet_1"},
        )

    def _create_internet_gateway(self) -> InternetGateway:
        """Create internet gateway."""
        return InternetGateway(
            self,
            "igw",
            vpc_id=self.vpc.id,
            tags={"Name": "igw_vpc_1"},
        )

    def _create_route_table(self) -> RouteTable:
        return RouteTable(
            self,
            "rt",
            vpc_id=self.vpc.id,
            tags={"Name": "rt_vpc_1"},
        )

    def _create_route_table_association(self) -> RouteTableAssociation:
        return RouteTableAssociation(
            self,
            "rt_association_vpc1",
            route_table_id=self.rt.id,
            subnet_id=self.subnet.id,
        )

    def _create_default_route(self) -> Route:
        """Create default route through the internet gateway."""
        return Route(
            self,
            "route_igw",
            route_table_id=self.rt.id,
            destination_cidr_block=self.config.default_route_cidr,
            gateway_id=self.igw.id,
        )

    def _lookup_ami(self) -> DataAwsAmi:
        """Look up the most recent Amazon Linux AMI."""
        return DataAwsAmi(
            self,
            "aws_ami",
            most_recent=self.config.ami.most_recent,
            owners=list(self.config.ami.owners),
            filter=[
                DataAwsAmiFilter(
                    name="name",
                    values=[self.config.ami.name_pattern],
                )
            ],
        )

    def _create_security_group(self) -> SecurityGroup:
        """Create security group allowing inbound SSH."""
        return SecurityGroup(
            self,
            "sg",
            name=self.config.security_group_name,
            vpc_id=self.vpc.id,
            ingress=[
                SecurityGroupIngress(
                    description="ssh",
                    protocol="tcp",
                    from_port=self.config.ssh_port,
                    to_port=self.config.ssh_port,
                )
            ],
        )

    def _create_instance(self) -> Instance:
        """Create EC2 instance."""
        return Instance(
            self,
            "ec2_1",
            ami=self.aws_ami.id,
            associate_public_ip_address=self.config.associate_public_ip,
            subnet_id=self.subnet.id,
            instance_type=self.config.instance_type,
            vpc_security_group_ids=[self.sg.id],
            user_data=self.config.user_data,
            tags={"Name": "ec2_1"},
        )

    def _create_outputs(self) -> TerraformOutput:
        """Define Terraform outputs."""
        return TerraformOutput(
            self,
            "public_ip",
            value=self.ec2.public_ip,
            description="EC2 Public IP",
        )
