#!/usr/bin/env python3
"""
Deploy a function to Tencent Cloud SCF using the Tencent Cloud Python SDK.
This script creates or updates the namespace, function, version and alias,
and optionally the API Gateway service, API, custom domain and usage plan
in front of the function.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException

from scf_deploy.adapter_config import AdapterConfig
from scf_deploy.resources import (
    bind_custom_domain,
    publish_version,
    reconcile_alias,
    reconcile_api,
    reconcile_function,
    reconcile_namespace,
    reconcile_service,
    reconcile_usage_plan,
    release_service,
    update_api_environment_strategy,
)
from scf_utils.code_loader import CodeLoader
from scf_utils.config import DEFAULT_CODE_DIR, DEFAULT_CONFIG_FILE, get_adapter_config, load_config
from scf_utils.errors import ScfDeployError
from scf_utils.login import Clients, ProfileProvider, create_clients

logger = logging.getLogger(__name__)


@dataclass
class DeployContext:
    """What the surrounding CLI pipeline hands to a deployment run."""

    config: Dict[str, Any]
    code_dir: str = DEFAULT_CODE_DIR
    package_name: Optional[str] = None


@dataclass
class DeployResult:
    region: str
    namespace: str
    function_name: str
    function_version: str
    alias: str
    service_id: Optional[str] = None
    sub_domain: Optional[str] = None
    api_id: Optional[str] = None
    usage_plan_id: Optional[str] = None
    urls: List[str] = field(default_factory=list)


def deploy_function_with_sdk(
    context: DeployContext,
    profile_provider: Optional[ProfileProvider] = None,
    code_loader: Optional[CodeLoader] = None,
    clients: Optional[Clients] = None,
) -> DeployResult:
    """
    Deploy a function to SCF, and an API Gateway in front of it when configured.

    Steps run strictly in order and any failure aborts the rest. Resources
    created before the failure are left in place; running the deployment
    again converges them.

    Args:
        context: Deploy context with the configuration and the code directory
        profile_provider: Resolves region and credentials (default: ProfileProvider)
        code_loader: Packages the function code (default: CodeLoader)
        clients: Pre-built clients; created from the resolved profile when omitted

    Returns:
        DeployResult: Identifiers of the deployed resources
    """
    adapter_config = AdapterConfig.from_dict(get_adapter_config(context.config))
    profile = (profile_provider or ProfileProvider()).provide(adapter_config)
    if clients is None:
        clients = create_clients(profile.region, profile.credentials)

    namespace = adapter_config.namespace
    function = adapter_config.function
    alias = adapter_config.alias

    print(f"\nDeploying {context.package_name or function.name} to the {profile.region} region of SCF...")
    print("- SCF:")

    ####### STEP 1: Namespace #######
    reconcile_namespace(clients, namespace)

    ####### STEP 2: Function #######
    code = (code_loader or CodeLoader()).load(context, adapter_config)
    reconcile_function(clients, function, code)

    ####### STEP 3: Version #######
    function_version = publish_version(clients, function.namespace, function.name)

    ####### STEP 4: Alias #######
    reconcile_alias(clients, alias, function_version)

    result = DeployResult(
        region=profile.region,
        namespace=namespace.name,
        function_name=function.name,
        function_version=function_version,
        alias=alias.name,
    )

    ####### STEP 5: API Gateway #######
    if adapter_config.gateway_enabled:
        print("\n- API Gateway:")
        gateway = adapter_config.api_gateway
        service, api, release = gateway.service, gateway.api, gateway.release

        service_id, sub_domain = reconcile_service(clients, service)
        result.service_id, result.sub_domain = service_id, sub_domain

        api_id, url = reconcile_api(clients, service_id, sub_domain, service.protocol,
                                    release.environment_name, api)
        result.api_id = api_id
        result.urls.append(url)

        if gateway.custom_domain.name:
            result.urls.append(bind_custom_domain(clients, service_id, gateway.custom_domain, sub_domain))

        if gateway.usage_plan.enabled:
            result.usage_plan_id = reconcile_usage_plan(clients, gateway.usage_plan, api, api_id, service_id)

        if gateway.strategy.strategy is not None:
            update_api_environment_strategy(clients, service_id, api_id, api, gateway.strategy)

        release_service(clients, service_id, release)

    logger.info(f"Deployed {function.name} version {function_version} as alias {alias.name}")
    print("Deploy finished")
    print()
    return result


def parse_arguments(argv=None):
    """Parse command line arguments for function deployment.

    Returns:
        argparse.Namespace: The parsed command line arguments
    """
    parser = argparse.ArgumentParser(description="Deploy a function to Tencent Cloud SCF")

    parser.add_argument("--config", "-c", dest="config_path", default=DEFAULT_CONFIG_FILE,
                        help="Path to the YAML configuration file")
    parser.add_argument("--code-dir", "-d", default=DEFAULT_CODE_DIR,
                        help="Directory holding the function code to upload")
    parser.add_argument("--region", "-r", help="Region to deploy to (overrides the configuration)")

    # Extra options
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    # Configure logging level based on verbosity
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    return args


def main(argv=None) -> int:
    """Main function for deploying a function to SCF."""
    args = parse_arguments(argv)

    try:
        config = load_config(args.config_path)
        if args.region:
            get_adapter_config(config)["region"] = args.region

        context = DeployContext(config=config, code_dir=args.code_dir, package_name=config.get("name"))
        deploy_function_with_sdk(context)
    except ScfDeployError as e:
        logger.error(f"Error deploying function: {e}")
        return 1
    except TencentCloudSDKException as e:
        logger.error(f"Tencent Cloud API error [{e.code}]: {e.message} (request id: {e.requestId})")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
