#!/usr/bin/env python3
"""
Resolve credentials and create the Tencent Cloud API clients used for a deployment.
Uses ScfClient and ApigatewayClient from tencentcloud-sdk-python.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from tencentcloud.apigateway.v20180808 import apigateway_client
from tencentcloud.common import credential
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.scf.v20180416 import scf_client

from scf_utils.errors import ConfigurationError
from scf_utils.config import REGION, SECRET_ID, SECRET_KEY, SESSION_TOKEN

logger = logging.getLogger(__name__)

# HmacSHA1/HmacSHA256 signing flattens the payload into form fields, which
# cannot carry explicit nulls, so every client signs with TC3-HMAC-SHA256
SIGN_METHOD = "TC3-HMAC-SHA256"


@dataclass
class Credentials:
    secret_id: str
    secret_key: str
    token: Optional[str] = None


@dataclass
class Profile:
    region: str
    credentials: Credentials


@dataclass
class Clients:
    """The three client handles of a deployment run. Read-only once created."""

    scf: object
    scf_ext: object
    api: object


class ProfileProvider:
    """
    Resolve the region and credentials for a deployment.

    Values from the adapter configuration win over the environment (.env).
    """

    def provide(self, adapter_config) -> Profile:
        configured = adapter_config.credentials or {}
        secret_id = configured.get("secretId") or configured.get("accessKeyId") or SECRET_ID
        secret_key = configured.get("secretKey") or configured.get("accessKeySecret") or SECRET_KEY
        token = configured.get("token") or SESSION_TOKEN or None

        if not secret_id or not secret_key:
            raise ConfigurationError(
                "Missing credentials. Set TENCENTCLOUD_SECRET_ID and TENCENTCLOUD_SECRET_KEY "
                "in the .env file or provide them in the credentials section.")

        region = adapter_config.region or REGION
        return Profile(region=region, credentials=Credentials(secret_id, secret_key, token))


def create_clients(region: str, credentials: Credentials) -> Clients:
    """
    Create the SCF and API Gateway clients.

    Args:
        region (str): The region to deploy to
        credentials (Credentials): The resolved credentials

    Returns:
        Clients: The SCF client, the SCF client used for code uploads and the API Gateway client
    """
    cred = credential.Credential(credentials.secret_id, credentials.secret_key, credentials.token)

    logger.info(f"Creating SCF and API Gateway clients for region: {region}")

    return Clients(
        scf=scf_client.ScfClient(cred, region, ClientProfile(signMethod=SIGN_METHOD)),
        scf_ext=scf_client.ScfClient(cred, region, ClientProfile(signMethod=SIGN_METHOD)),
        api=apigateway_client.ApigatewayClient(cred, region, ClientProfile(signMethod=SIGN_METHOD)),
    )

