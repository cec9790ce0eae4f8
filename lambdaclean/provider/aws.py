"""
ResourceProvider backed by the AWS Lambda and CloudFormation APIs.
"""

import logging
from typing import Optional

import boto3

from ..config import client_config
from .base import GroupMember, MemberKind, Page, ResourceProvider

logger = logging.getLogger(__name__)

_MEMBER_KINDS = {
    "AWS::Lambda::Function": MemberKind.FUNCTION,
    "AWS::CloudFormation::Stack": MemberKind.GROUP,
}


class AwsProvider(ResourceProvider):
    """
    Lists and deletes Lambda function versions through boto3.

    Clients are created lazily from the given session so that a provider
    used only in prefix mode never builds a CloudFormation client.
    botocore errors are not caught here; the streams wrap them.
    """

    def __init__(self, session: Optional[boto3.session.Session] = None,
                 lambda_client=None, cloudformation_client=None):
        self.session = session or boto3.session.Session()
        self._lambda = lambda_client
        self._cloudformation = cloudformation_client

    @property
    def lambda_client(self):
        if self._lambda is None:
            self._lambda = self.session.client("lambda", config=client_config())
        return self._lambda

    @property
    def cloudformation_client(self):
        if self._cloudformation is None:
            self._cloudformation = self.session.client("cloudformation", config=client_config())
        return self._cloudformation

    def list_functions(self, cursor: Optional[str] = None) -> Page[str]:
        kwargs = {"Marker": cursor} if cursor else {}
        response = self.lambda_client.list_functions(**kwargs)
        names = [fn["FunctionName"] for fn in response.get("Functions", [])]
        return Page(names, response.get("NextMarker"))

    def list_group_members(self, group: str, cursor: Optional[str] = None) -> Page[GroupMember]:
        kwargs = {"StackName": group}
        if cursor:
            kwargs["NextToken"] = cursor
        response = self.cloudformation_client.list_stack_resources(**kwargs)

        members = []
        for resource in response.get("StackResourceSummaries", []):
            kind = _MEMBER_KINDS.get(resource.get("ResourceType"), MemberKind.OTHER)
            members.append(GroupMember(kind, resource.get("PhysicalResourceId")))
        return Page(members, response.get("NextToken"))

    def list_versions(self, function: str, cursor: Optional[str] = None) -> Page[str]:
        kwargs = {"FunctionName": function}
        if cursor:
            kwargs["Marker"] = cursor
        response = self.lambda_client.list_versions_by_function(**kwargs)
        versions = [v["Version"] for v in response.get("Versions", [])]
        return Page(versions, response.get("NextMarker"))

    def delete_function_version(self, function: str, version: str) -> None:
        logger.debug(f"Deleting {function}:{version}")
        self.lambda_client.delete_function(FunctionName=function, Qualifier=version)
