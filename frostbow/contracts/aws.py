from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from frostbow.exceptions.exceptions import InvalidLocatorError


@dataclass(frozen=True)
class CredentialSnapshot:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    expiry: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        # Snapshots without an expiry never expire.
        return self.expiry is not None and self.expiry <= now


@dataclass(frozen=True)
class SigningKey:
    access_key: str
    secret_key: str = field(repr=False)
    region: str
    service: str
    session_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_credentials(
        cls, credentials: CredentialSnapshot, *, region: str, service: str
    ) -> "SigningKey":
        return cls(
            access_key=credentials.access_key_id,
            secret_key=credentials.secret_access_key,
            session_token=credentials.session_token,
            region=region,
            service=service,
        )


@dataclass(frozen=True)
class TableBucketArn:
    """
    An S3 Tables table bucket ARN,
    e.g. ``arn:aws:s3tables:us-east-1:111122223333:bucket/analytics``.
    """

    arn: str
    partition: str
    region: str
    account_id: str
    bucket: str

    @classmethod
    def parse(cls, arn: str) -> "TableBucketArn":
        parts = arn.split(":", 5)
        if len(parts) != 6 or parts[0] != "arn":
            raise InvalidLocatorError(arn, "expected arn:<partition>:s3tables:...")
        _, partition, service, region, account_id, resource = parts
        if service != "s3tables":
            raise InvalidLocatorError(arn, f"unsupported ARN service {service!r}")
        resource_type, _, bucket = resource.partition("/")
        if resource_type != "bucket" or not bucket:
            raise InvalidLocatorError(arn, "expected a bucket/<name> resource")
        return cls(
            arn=arn,
            partition=partition,
            region=region,
            account_id=account_id,
            bucket=bucket,
        )
