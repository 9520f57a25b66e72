from typing import Optional

import logging
import os

import boto3

from pydantic import BaseModel

from ..common.utils import coalesce
from ..exception import ConfigurationError


logger = logging.getLogger(__name__)


class AwsSettings(BaseModel):
    region: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    @staticmethod
    def from_environment(region: Optional[str] = None) -> 'AwsSettings':
        return AwsSettings(
            region=coalesce(region, os.environ.get('AWS_REGION'),
                    os.environ.get('AWS_DEFAULT_REGION')),
            access_key=os.environ.get('AWS_ACCESS_KEY_ID'),
            secret_key=os.environ.get('AWS_SECRET_ACCESS_KEY'))

    def make_boto3_client(self, service_name: str):
        if not self.region:
            raise ConfigurationError('Missing region to access AWS')

        if self.access_key:
            if not self.secret_key:
                raise ConfigurationError('AWS access key found but not secret access key')

            return boto3.client(
                service_name,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                region_name=self.region
            )  # type: ignore

        logger.debug(f"Using default credential chain for {service_name} in {self.region}")
        return boto3.client(service_name, region_name=self.region)

    def make_events_client(self):
        return self.make_boto3_client('events')

    def make_cloudwatch_client(self):
        return self.make_boto3_client('cloudwatch')
