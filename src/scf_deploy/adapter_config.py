#!/usr/bin/env python3
"""
Typed view of the SCF adapter configuration.

The configuration source is a nested mapping (usually loaded from YAML) using
camelCase keys. ``AdapterConfig.from_dict`` reads the recognised sections and
fills in the defaults that tie them together, e.g. the alias points at the
function and the API routes to the alias.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scf_utils.errors import ConfigurationError

API_GATEWAY = "api-gateway"
DEFAULT_NAMESPACE = "default"
DEFAULT_ALIAS = "test"
DEFAULT_ENVIRONMENT = "release"


@dataclass
class NamespaceConfig:
    name: str = DEFAULT_NAMESPACE
    description: Optional[str] = None


@dataclass
class FunctionConfig:
    name: str
    namespace: str = DEFAULT_NAMESPACE
    description: Optional[str] = None
    runtime: Optional[str] = None
    memory_size: Optional[int] = None
    timeout: Optional[int] = None
    role: Optional[str] = None
    handler: Optional[str] = None
    code_source: Optional[str] = None
    type: Optional[str] = None
    cls_logset_id: Optional[str] = None
    cls_topic_id: Optional[str] = None
    publish: bool = False
    l5_enable: bool = False
    env: Dict[str, str] = field(default_factory=dict)
    vpc_config: Optional[Dict[str, Any]] = None
    layers: Optional[List[Dict[str, Any]]] = None
    dead_letter_config: Optional[Dict[str, Any]] = None
    public_net_config: Optional[Dict[str, Any]] = None


@dataclass
class AliasConfig:
    name: str
    function_name: str
    namespace: str
    description: Optional[str] = None
    routing_config: Optional[Dict[str, Any]] = None


@dataclass
class ServiceConfig:
    name: str
    protocol: str = "http&https"
    description: Optional[str] = None
    net_types: List[str] = field(default_factory=lambda: ["OUTER"])
    ip_version: Optional[str] = None
    set_server_name: Optional[str] = None
    app_id_type: Optional[str] = None


@dataclass
class ApiConfig:
    name: str
    path: str = "/"
    method: str = "ANY"
    desc: Optional[str] = None
    protocol: str = "HTTP"
    service_timeout: Optional[int] = None
    auth_type: Optional[str] = None
    enable_cors: Optional[bool] = None
    business_type: Optional[str] = None
    service_scf_function_name: Optional[str] = None
    service_scf_function_namespace: Optional[str] = None
    service_scf_function_qualifier: Optional[str] = None
    service_scf_is_integrated_response: Optional[bool] = None
    service_websocket_transport_function_name: Optional[str] = None
    service_websocket_transport_function_namespace: Optional[str] = None
    service_websocket_transport_function_qualifier: Optional[str] = None
    is_debug_after_charge: Optional[bool] = None
    is_delete_response_error_codes: Optional[bool] = None
    response_type: Optional[str] = None
    response_success_example: Optional[str] = None
    response_fail_example: Optional[str] = None
    auth_relation_api_id: Optional[str] = None
    user_type: Optional[str] = None
    request_parameters: Optional[List[Dict[str, Any]]] = None
    oauth_config: Optional[Dict[str, Any]] = None
    response_error_codes: Optional[List[Dict[str, Any]]] = None


@dataclass
class CustomDomainConfig:
    name: Optional[str] = None
    protocol: str = "http"
    is_default_mapping: Optional[bool] = None
    certificate_id: Optional[str] = None
    net_type: Optional[str] = None
    path_mapping_set: Optional[List[Dict[str, Any]]] = None


@dataclass
class UsagePlanConfig:
    name: Optional[str] = None
    desc: Optional[str] = None
    environment: str = DEFAULT_ENVIRONMENT
    max_request_num: Optional[int] = None
    max_request_num_pre_sec: Optional[int] = None

    @property
    def enabled(self) -> bool:
        return self.max_request_num is not None or self.max_request_num_pre_sec is not None


@dataclass
class StrategyConfig:
    environment_name: str = DEFAULT_ENVIRONMENT
    strategy: Optional[int] = None


@dataclass
class ReleaseConfig:
    environment_name: str = DEFAULT_ENVIRONMENT
    desc: Optional[str] = None


@dataclass
class ApiGatewayConfig:
    service: ServiceConfig
    api: ApiConfig
    custom_domain: CustomDomainConfig = field(default_factory=CustomDomainConfig)
    usage_plan: UsagePlanConfig = field(default_factory=UsagePlanConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)


@dataclass
class AdapterConfig:
    namespace: NamespaceConfig
    function: FunctionConfig
    alias: AliasConfig
    api_gateway: ApiGatewayConfig
    type: Optional[str] = None
    region: Optional[str] = None
    credentials: Dict[str, str] = field(default_factory=dict)

    @property
    def gateway_enabled(self) -> bool:
        return self.type == API_GATEWAY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdapterConfig":
        """
        Build an adapter configuration from a nested mapping.

        Args:
            data: The adapter section of the configuration source

        Returns:
            AdapterConfig: The configuration with cross-section defaults applied

        Raises:
            ConfigurationError: If the function name is missing
        """
        data = data or {}
        namespace_data = data.get("namespace") or {}
        function_data = data.get("function") or {}
        alias_data = data.get("alias") or {}
        gateway_data = data.get("apiGateway") or {}

        function_name = function_data.get("name")
        if not function_name:
            raise ConfigurationError("function.name is required")

        namespace = NamespaceConfig(
            name=namespace_data.get("name") or DEFAULT_NAMESPACE,
            description=namespace_data.get("description"),
        )
        function = _function_config(function_data, namespace.name)
        alias = AliasConfig(
            name=alias_data.get("name") or DEFAULT_ALIAS,
            function_name=alias_data.get("functionName") or function.name,
            namespace=alias_data.get("namespace") or function.namespace,
            description=alias_data.get("description"),
            routing_config=alias_data.get("routingConfig"),
        )

        # customDomain is accepted both at the top level and under apiGateway
        custom_domain_data = gateway_data.get("customDomain") or data.get("customDomain") or {}

        return cls(
            namespace=namespace,
            function=function,
            alias=alias,
            api_gateway=_api_gateway_config(gateway_data, custom_domain_data, function, alias),
            type=data.get("type"),
            region=data.get("region"),
            credentials=data.get("credentials") or {},
        )


def _function_config(data: Dict[str, Any], namespace: str) -> FunctionConfig:
    return FunctionConfig(
        name=data["name"],
        namespace=data.get("namespace") or namespace,
        description=data.get("description"),
        runtime=data.get("runtime"),
        memory_size=data.get("memorySize"),
        timeout=data.get("timeout"),
        role=data.get("role"),
        handler=data.get("handler"),
        code_source=data.get("codeSource"),
        type=data.get("type"),
        cls_logset_id=data.get("clsLogsetId"),
        cls_topic_id=data.get("clsTopicId"),
        publish=data.get("publish") is True,
        l5_enable=data.get("l5Enable") is True,
        env=data.get("env") or {},
        vpc_config=data.get("vpcConfig"),
        layers=data.get("layers"),
        dead_letter_config=data.get("deadLetterConfig"),
        public_net_config=data.get("publicNetConfig"),
    )


def _api_gateway_config(data: Dict[str, Any], custom_domain: Dict[str, Any],
                        function: FunctionConfig, alias: AliasConfig) -> ApiGatewayConfig:
    service_data = data.get("service") or {}
    api_data = data.get("api") or {}
    request_config = api_data.get("requestConfig") or {}
    usage_plan_data = data.get("usagePlan") or {}
    strategy_data = data.get("strategy") or {}
    release_data = data.get("release") or {}

    release = ReleaseConfig(
        environment_name=release_data.get("environmentName") or DEFAULT_ENVIRONMENT,
        desc=release_data.get("desc"),
    )

    service = ServiceConfig(
        name=service_data.get("name") or function.name,
        protocol=service_data.get("protocol") or "http&https",
        description=service_data.get("description"),
        net_types=service_data.get("netTypes") or ["OUTER"],
        ip_version=service_data.get("ipVersion"),
        set_server_name=service_data.get("setServerName"),
        app_id_type=service_data.get("appIdType"),
    )

    api = ApiConfig(
        name=api_data.get("name") or function.name,
        path=request_config.get("path") or "/",
        method=request_config.get("method") or "ANY",
        desc=api_data.get("desc"),
        protocol=api_data.get("protocol") or "HTTP",
        service_timeout=api_data.get("serviceTimeout"),
        auth_type=api_data.get("authType"),
        enable_cors=api_data.get("enableCORS"),
        business_type=api_data.get("businessType"),
        service_scf_function_name=api_data.get("serviceScfFunctionName") or function.name,
        service_scf_function_namespace=api_data.get("serviceScfFunctionNamespace") or function.namespace,
        service_scf_function_qualifier=api_data.get("serviceScfFunctionQualifier") or alias.name,
        service_scf_is_integrated_response=api_data.get("serviceScfIsIntegratedResponse"),
        service_websocket_transport_function_name=api_data.get("serviceWebsocketTransportFunctionName"),
        service_websocket_transport_function_namespace=api_data.get("serviceWebsocketTransportFunctionNamespace"),
        service_websocket_transport_function_qualifier=api_data.get("serviceWebsocketTransportFunctionQualifier"),
        is_debug_after_charge=api_data.get("isDebugAfterCharge"),
        is_delete_response_error_codes=api_data.get("isDeleteResponseErrorCodes"),
        response_type=api_data.get("responseType"),
        response_success_example=api_data.get("responseSuccessExample"),
        response_fail_example=api_data.get("responseFailExample"),
        auth_relation_api_id=api_data.get("authRelationApiId"),
        user_type=api_data.get("userType"),
        request_parameters=api_data.get("requestParameters"),
        oauth_config=api_data.get("oauthConfig"),
        response_error_codes=api_data.get("responseErrorCodes"),
    )

    return ApiGatewayConfig(
        service=service,
        api=api,
        custom_domain=CustomDomainConfig(
            name=custom_domain.get("name"),
            protocol=custom_domain.get("protocol") or "http",
            is_default_mapping=custom_domain.get("isDefaultMapping"),
            certificate_id=custom_domain.get("certificateId"),
            net_type=custom_domain.get("netType"),
            path_mapping_set=custom_domain.get("pathMappingSet"),
        ),
        usage_plan=UsagePlanConfig(
            name=usage_plan_data.get("name") or f"{function.name}-usage-plan",
            desc=usage_plan_data.get("desc"),
            environment=usage_plan_data.get("environment") or release.environment_name,
            max_request_num=usage_plan_data.get("maxRequestNum"),
            max_request_num_pre_sec=usage_plan_data.get("maxRequestNumPreSec"),
        ),
        strategy=StrategyConfig(
            environment_name=strategy_data.get("environmentName") or release.environment_name,
            strategy=strategy_data.get("strategy"),
        ),
        release=release,
    )
