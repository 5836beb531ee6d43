#!/usr/bin/env python3
"""
Reconcile each managed SCF and API Gateway resource.

Every function here translates one section of the adapter configuration into
typed requests, decides between create and update through ``reconcile`` and
reports the step through the progress spinner.
"""

import base64
import logging
import time
from typing import Any, Dict, Tuple, Type, TypeVar

from tencentcloud.common.abstract_model import AbstractModel
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException

from scf_deploy.adapter_config import (
    AliasConfig,
    ApiConfig,
    CustomDomainConfig,
    FunctionConfig,
    NamespaceConfig,
    ReleaseConfig,
    ServiceConfig,
    StrategyConfig,
    UsagePlanConfig,
)
from scf_deploy.models import apigateway, build, scf
from scf_deploy.reconcile import call, lookup_one, matching, reconcile
from scf_deploy.status import get_function, wait_for_function_active
from scf_utils.config import API_RETRY_DELAY
from scf_utils.errors import ALIAS_NOT_FOUND, FUNCTION_NOT_FOUND, INTERNAL_ERROR
from scf_utils.login import Clients
from scf_utils.spinner import Progress, spinner

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=AbstractModel)


####### NAMESPACE #######

def reconcile_namespace(clients: Clients, namespace: NamespaceConfig) -> str:
    """
    Create the namespace, or update its description when one is configured.

    Returns:
        str: "created", "updated" or "skipped"
    """
    def lookup():
        response = call(clients.scf, build(scf.ListNamespacesRequest, Limit=100))
        return matching(response.get("Namespaces"), "Name", namespace.name)

    def create():
        spinner(f"Create a {namespace.name} namespace", lambda: call(clients.scf, build(
            scf.CreateNamespaceRequest, Namespace=namespace.name, Description=namespace.description)))
        return "created"

    def update(_existing):
        if not namespace.description:
            spinner(f"Skip {namespace.name} namespace", lambda: None)
            return "skipped"
        spinner(f"Update {namespace.name} namespace", lambda: call(clients.scf, build(
            scf.UpdateNamespaceRequest, Namespace=namespace.name, Description=namespace.description)))
        return "updated"

    return reconcile("namespace", namespace.name, lookup, create, update)


####### FUNCTION #######

def _bool_flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def function_request(request_cls: Type[R], function: FunctionConfig, **extra) -> R:
    """
    Build a create or configuration-update request from the function configuration.

    Args:
        request_cls: CreateFunctionRequest or UpdateFunctionConfigurationRequest
        function: The function configuration
        extra: Operation specific fields (Handler, Code, Publish, ...)
    """
    req = build(
        request_cls,
        FunctionName=function.name,
        Description=function.description,
        MemorySize=function.memory_size,
        Timeout=function.timeout,
        Runtime=function.runtime,
        Namespace=function.namespace,
        Role=function.role,
        ClsLogsetId=function.cls_logset_id,
        ClsTopicId=function.cls_topic_id,
        **extra,
    )

    if function.env:
        req.Environment = build(scf.Environment, Variables=[
            build(scf.Variable, Key=key, Value=None if value is None else str(value))
            for key, value in function.env.items()
        ])

    vpc = function.vpc_config
    if vpc:
        req.VpcConfig = build(scf.VpcConfig, VpcId=vpc.get("vpcId"), SubnetId=vpc.get("subnetId"))

    if function.layers:
        req.Layers = [
            build(scf.LayerVersionSimple, LayerName=layer.get("name"), LayerVersion=layer.get("version"))
            for layer in function.layers
        ]

    dead_letter = function.dead_letter_config
    if dead_letter:
        req.DeadLetterConfig = build(
            scf.DeadLetterConfig,
            Type=dead_letter.get("type"),
            Name=dead_letter.get("name"),
            FilterType=dead_letter.get("filterType"),
        )

    public_net = function.public_net_config
    if public_net:
        eip = public_net.get("eipConfig")
        req.PublicNetConfig = build(
            scf.PublicNetConfigIn,
            PublicNetStatus=public_net.get("publicNetStatus"),
            EipConfig=build(scf.EipConfigIn, EipStatus=eip.get("eipStatus")) if eip else None,
        )

    return req


def reconcile_function(clients: Clients, function: FunctionConfig, code: bytes) -> str:
    """
    Create the function with its code, or update its code and then its configuration.

    SCF rejects configuration changes while a code deployment is in flight, so
    the configuration update waits for the function to become Active first.
    Code uploads go through the dedicated upload client.

    Returns:
        str: "created" or "updated"
    """
    zip_file = base64.b64encode(code).decode("ascii")

    def lookup():
        return lookup_one(lambda: get_function(clients.scf, function.namespace, function.name),
                          FUNCTION_NOT_FOUND)

    def create():
        def action():
            req = function_request(
                scf.CreateFunctionRequest,
                function,
                Handler=function.handler,
                Code=build(scf.Code, ZipFile=zip_file),
                CodeSource=function.code_source,
                Type=function.type,
            )
            call(clients.scf_ext, req)

        spinner(f"Create {function.name} function", action)
        return "created"

    def update(_existing):
        def action():
            call(clients.scf_ext, build(
                scf.UpdateFunctionCodeRequest,
                FunctionName=function.name,
                Namespace=function.namespace,
                Handler=function.handler,
                ZipFile=zip_file,
            ))

            wait_for_function_active(clients.scf, function.namespace, function.name)

            req = function_request(
                scf.UpdateFunctionConfigurationRequest,
                function,
                Publish=_bool_flag(function.publish),
                L5Enable=_bool_flag(function.l5_enable),
            )
            call(clients.scf, req)

        spinner(f"Update {function.name} function", action)
        return "updated"

    return reconcile("function", function.name, lookup, create, update)


def publish_version(clients: Clients, namespace: str, function_name: str) -> str:
    """Wait for the function to settle and publish a new version of it."""
    with Progress("Publish Version") as progress:
        wait_for_function_active(clients.scf, namespace, function_name)
        response = call(clients.scf, build(
            scf.PublishVersionRequest, FunctionName=function_name, Namespace=namespace))
        version = response["FunctionVersion"]
        progress.success_text = f"Publish Version {version}"
    return version


####### ALIAS #######

def alias_request(request_cls: Type[R], alias: AliasConfig, function_version: str) -> R:
    req = build(
        request_cls,
        Name=alias.name,
        FunctionName=alias.function_name,
        Namespace=alias.namespace,
        FunctionVersion=function_version,
        Description=alias.description,
    )

    routing = alias.routing_config
    if routing:
        weights = routing.get("additionalVersionWeights")
        matches = routing.get("addtionVersionMatchs")
        req.RoutingConfig = build(
            scf.RoutingConfig,
            AdditionalVersionWeights=[
                build(scf.VersionWeight, Version=w.get("version"), Weight=w.get("weight")) for w in weights
            ] if weights else None,
            AddtionVersionMatchs=[
                build(
                    scf.VersionMatch,
                    Version=m.get("version"),
                    Key=m.get("key"),
                    Method=m.get("method"),
                    Expression=m.get("expression"),
                ) for m in matches
            ] if matches else None,
        )

    return req


def reconcile_alias(clients: Clients, alias: AliasConfig, function_version: str) -> str:
    """Point the alias at ``function_version``, creating the alias if needed."""
    def lookup():
        return lookup_one(lambda: call(clients.scf, build(
            scf.GetAliasRequest, Name=alias.name, FunctionName=alias.function_name, Namespace=alias.namespace)),
            ALIAS_NOT_FOUND)

    def write(request_cls):
        wait_for_function_active(clients.scf, alias.namespace, alias.function_name)
        call(clients.scf, alias_request(request_cls, alias, function_version))

    def create():
        spinner(f"Create {alias.name} alias to version {function_version}",
                lambda: write(scf.CreateAliasRequest))
        return "created"

    def update(_existing):
        spinner(f"Update {alias.name} alias to version {function_version}",
                lambda: write(scf.UpdateAliasRequest))
        return "updated"

    return reconcile("alias", alias.name, lookup, create, update)


####### API GATEWAY SERVICE #######

def reconcile_service(clients: Clients, service: ServiceConfig) -> Tuple[str, str]:
    """
    Create or update the API Gateway service.

    Returns:
        tuple: (service id, outer sub domain)
    """
    def lookup():
        response = call(clients.api, build(
            apigateway.DescribeServicesStatusRequest,
            Limit=100,
            Filters=[build(apigateway.Filter, Name="ServiceName", Values=[service.name])],
        ))
        return matching(response["Result"].get("ServiceSet"), "ServiceName", service.name)

    def create():
        def action():
            response = call(clients.api, build(
                apigateway.CreateServiceRequest,
                ServiceName=service.name,
                Protocol=service.protocol,
                ServiceDesc=service.description,
                NetTypes=service.net_types,
                IpVersion=service.ip_version,
                SetServerName=service.set_server_name,
                AppIdType=service.app_id_type,
            ))
            return response["ServiceId"], response["OuterSubDomain"]

        return spinner(f"Create {service.name} service", action)

    def update(existing):
        def action():
            call(clients.api, build(
                apigateway.ModifyServiceRequest,
                ServiceId=existing["ServiceId"],
                ServiceName=service.name,
                Protocol=service.protocol,
                ServiceDesc=service.description,
                NetTypes=service.net_types,
            ))
            return existing["ServiceId"], existing["OuterSubDomain"]

        return spinner(f"Update {service.name} service", action)

    return reconcile("service", service.name, lookup, create, update)


####### API #######

def api_request(request_cls: Type[R], api: ApiConfig, service_id: str, **extra) -> R:
    """
    Build a create or modify request for an SCF-backed API.

    Backends other than SCF are never configured here, so their fields stay
    ``None`` and are sent as ``null`` to clear whatever was set before.
    """
    req = build(
        request_cls,
        ServiceId=service_id,
        ServiceType="SCF",
        ServiceTimeout=api.service_timeout,
        Protocol=api.protocol,
        RequestConfig=build(apigateway.ApiRequestConfig, Path=api.path, Method=api.method),
        ApiName=api.name,
        ApiDesc=api.desc,
        ApiType="NORMAL",
        AuthType=api.auth_type,
        EnableCORS=api.enable_cors,
        ApiBusinessType=api.business_type,
        ServiceScfFunctionName=api.service_scf_function_name,
        ServiceScfFunctionNamespace=api.service_scf_function_namespace,
        ServiceScfFunctionQualifier=api.service_scf_function_qualifier,
        ServiceScfIsIntegratedResponse=api.service_scf_is_integrated_response,
        ServiceWebsocketTransportFunctionName=api.service_websocket_transport_function_name,
        ServiceWebsocketTransportFunctionNamespace=api.service_websocket_transport_function_namespace,
        ServiceWebsocketTransportFunctionQualifier=api.service_websocket_transport_function_qualifier,
        IsDebugAfterCharge=api.is_debug_after_charge,
        IsDeleteResponseErrorCodes=api.is_delete_response_error_codes,
        ResponseType=api.response_type,
        ResponseSuccessExample=api.response_success_example,
        ResponseFailExample=api.response_fail_example,
        AuthRelationApiId=api.auth_relation_api_id,
        **extra,
    )

    if api.request_parameters:
        req.RequestParameters = [
            build(
                apigateway.RequestParameter,
                Name=p.get("name"),
                Desc=p.get("desc"),
                Position=p.get("position"),
                Type=p.get("type"),
                DefaultValue=p.get("defaultValue"),
                Required=p.get("required"),
            ) for p in api.request_parameters
        ]

    oauth = api.oauth_config
    if oauth:
        req.OauthConfig = build(
            apigateway.OauthConfig,
            PublicKey=oauth.get("publicKey"),
            TokenLocation=oauth.get("tokenLocation"),
            LoginRedirectUrl=oauth.get("loginRedirectUrl"),
        )

    if api.response_error_codes:
        req.ResponseErrorCodes = [
            build(
                apigateway.ResponseErrorCodeReq,
                Code=r.get("code"),
                Msg=r.get("msg"),
                Desc=r.get("desc"),
                ConvertedCode=r.get("convertedCode"),
                NeedConvert=r.get("needConvert"),
            ) for r in api.response_error_codes
        ]

    return req


def modify_api(client, request: apigateway.ModifyApiRequest) -> Dict[str, Any]:
    """
    Send ModifyApi, retrying once when the gateway answers InternalError.

    ModifyApi occasionally fails with InternalError right after the service
    was modified. Every other error propagates.
    """
    try:
        return call(client, request)
    except TencentCloudSDKException as e:
        if e.code != INTERNAL_ERROR:
            raise
        logger.warning(f"ModifyApi failed with {e.code}, retrying in {API_RETRY_DELAY}s")
        time.sleep(API_RETRY_DELAY)
        return call(client, request)


def api_url(sub_domain: str, service_protocol: str, environment_name: str, path: str) -> str:
    """Public URL of an API: the release environment is served without a path prefix."""
    protocol = "https" if "https" in service_protocol else "http"
    prefix = "" if environment_name == "release" else f"/{environment_name}"
    return f"{protocol}://{sub_domain}{prefix}{path.split('*')[0]}"


def reconcile_api(clients: Clients, service_id: str, sub_domain: str, service_protocol: str,
                  environment_name: str, api: ApiConfig) -> Tuple[str, str]:
    """
    Create or update the API inside the service.

    Returns:
        tuple: (api id, public url)
    """
    def lookup():
        response = call(clients.api, build(
            apigateway.DescribeApisStatusRequest,
            ServiceId=service_id,
            Limit=100,
            Filters=[build(apigateway.Filter, Name="ApiName", Values=[api.name])],
        ))
        return matching(response["Result"].get("ApiIdStatusSet"), "ApiName", api.name)

    def create():
        def action():
            req = api_request(apigateway.CreateApiRequest, api, service_id, UserType=api.user_type)
            response = call(clients.api, req)
            return response["Result"]["ApiId"]

        return spinner(f"Create {api.name} api", action)

    def update(existing):
        def action():
            api_id = existing["ApiId"]
            modify_api(clients.api, api_request(apigateway.ModifyApiRequest, api, service_id, ApiId=api_id))
            return api_id

        return spinner(f"Update {api.name} api", action)

    api_id = reconcile("api", api.name, lookup, create, update)

    url = api_url(sub_domain, service_protocol, environment_name, api.path)
    print(f"    - Url: {url}")
    return api_id, url


####### CUSTOM DOMAIN #######

def custom_domain_request(request_cls: Type[R], custom_domain: CustomDomainConfig, service_id: str,
                          **extra) -> R:
    mappings = custom_domain.path_mapping_set
    return build(
        request_cls,
        ServiceId=service_id,
        SubDomain=custom_domain.name,
        IsDefaultMapping=custom_domain.is_default_mapping,
        CertificateId=custom_domain.certificate_id,
        Protocol=custom_domain.protocol,
        NetType=custom_domain.net_type,
        PathMappingSet=[
            build(apigateway.PathMapping, Path=m.get("path"), Environment=m.get("environment"))
            for m in mappings
        ] if mappings else None,
        **extra,
    )


def bind_custom_domain(clients: Clients, service_id: str, custom_domain: CustomDomainConfig,
                       net_sub_domain: str) -> str:
    """
    Bind the custom domain to the service, or update an existing binding.

    Returns:
        str: The URL served on the custom domain
    """
    def lookup():
        response = call(clients.api, build(apigateway.DescribeServiceSubDomainsRequest, ServiceId=service_id))
        result = response["Result"]
        if not result.get("TotalCount"):
            return []
        return matching(result.get("DomainSet"), "DomainName", custom_domain.name)

    def create():
        spinner(f"Create {custom_domain.name} customDomain", lambda: call(clients.api, custom_domain_request(
            apigateway.BindSubDomainRequest, custom_domain, service_id, NetSubDomain=net_sub_domain)))
        return "created"

    def update(_existing):
        spinner(f"Update {custom_domain.name} customDomain", lambda: call(clients.api, custom_domain_request(
            apigateway.ModifySubDomainRequest, custom_domain, service_id)))
        return "updated"

    reconcile("customDomain", custom_domain.name, lookup, create, update)

    protocol = "https" if "https" in custom_domain.protocol else "http"
    url = f"{protocol}://{custom_domain.name}"
    print(f"    - Url: {url}")
    return url


####### USAGE PLAN #######

def reconcile_usage_plan(clients: Clients, usage_plan: UsagePlanConfig, api: ApiConfig, api_id: str,
                         service_id: str) -> str:
    """
    Create or update the usage plan and bind it to the API's environment.

    Returns:
        str: The usage plan id
    """
    def lookup():
        response = call(clients.api, build(
            apigateway.DescribeUsagePlansStatusRequest,
            Limit=100,
            Filters=[build(apigateway.Filter, Name="UsagePlanName", Values=[usage_plan.name])],
        ))
        return matching(response["Result"].get("UsagePlanStatusSet"), "UsagePlanName", usage_plan.name)

    def create():
        def action():
            response = call(clients.api, build(
                apigateway.CreateUsagePlanRequest,
                UsagePlanName=usage_plan.name,
                UsagePlanDesc=usage_plan.desc,
                MaxRequestNum=usage_plan.max_request_num,
                MaxRequestNumPreSec=usage_plan.max_request_num_pre_sec,
            ))
            return response["Result"]["UsagePlanId"]

        return spinner(f"Create {usage_plan.name} usage plan", action)

    def update(existing):
        def action():
            call(clients.api, build(
                apigateway.ModifyUsagePlanRequest,
                UsagePlanId=existing["UsagePlanId"],
                UsagePlanName=usage_plan.name,
                UsagePlanDesc=usage_plan.desc,
                MaxRequestNum=usage_plan.max_request_num,
                MaxRequestNumPreSec=usage_plan.max_request_num_pre_sec,
            ))
            return existing["UsagePlanId"]

        return spinner(f"Update {usage_plan.name} usage plan", action)

    usage_plan_id = reconcile("usage plan", usage_plan.name, lookup, create, update)
    bind_environment(clients, service_id, api_id, api, usage_plan, usage_plan_id)
    return usage_plan_id


def bind_environment(clients: Clients, service_id: str, api_id: str, api: ApiConfig,
                     usage_plan: UsagePlanConfig, usage_plan_id: str):
    spinner(f"Bind {usage_plan.name} usage plan to {api.name} api", lambda: call(clients.api, build(
        apigateway.BindEnvironmentRequest,
        ServiceId=service_id,
        BindType="API",
        UsagePlanIds=[usage_plan_id],
        Environment=usage_plan.environment,
        ApiIds=[api_id],
    )))


####### STRATEGY & RELEASE #######

def update_api_environment_strategy(clients: Clients, service_id: str, api_id: str, api: ApiConfig,
                                    strategy: StrategyConfig):
    spinner(f"Update {strategy.environment_name} environment strategy to {api.name} api", lambda: call(
        clients.api, build(
            apigateway.ModifyApiEnvironmentStrategyRequest,
            ServiceId=service_id,
            ApiIds=[api_id],
            EnvironmentName=strategy.environment_name,
            Strategy=strategy.strategy,
        )))


def release_service(clients: Clients, service_id: str, release: ReleaseConfig):
    spinner(f"Release {release.environment_name} environment", lambda: call(clients.api, build(
        apigateway.ReleaseServiceRequest,
        ServiceId=service_id,
        EnvironmentName=release.environment_name,
        ReleaseDesc=release.desc,
    )))
