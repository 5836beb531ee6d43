import pytest

from tencentcloud.apigateway.v20180808 import apigateway_client
from tencentcloud.scf.v20180416 import scf_client

from scf_deploy.models import action_of, apigateway, build, scf, to_params


class TestBuild:
    def test_assigns_fields_by_name(self):
        req = build(scf.GetFunctionRequest, FunctionName="hello", Namespace="demo")

        assert req.FunctionName == "hello"
        assert req.Namespace == "demo"

    def test_rejects_fields_the_operation_does_not_accept(self):
        with pytest.raises(TypeError, match="NetSubDomain"):
            build(apigateway.ModifySubDomainRequest, ServiceId="service-1", NetSubDomain="x.example.com")

        with pytest.raises(TypeError, match="UserType"):
            build(apigateway.ModifyApiRequest, ApiId="api-1", UserType="OUTER")

        with pytest.raises(TypeError, match="ExclusiveSetName"):
            build(apigateway.CreateServiceRequest, ServiceName="demo", ExclusiveSetName="set-1")

    def test_rejects_model_internals(self):
        with pytest.raises(TypeError):
            build(scf.GetFunctionRequest, headers={"X-TC-TraceId": "1"})


class TestToParams:
    """Payloads built from SDK request models."""

    def test_unset_fields_are_sent_as_null(self):
        params = to_params(build(scf.UpdateNamespaceRequest, Namespace="demo"))

        assert params == {"Namespace": "demo", "Description": None}

    def test_omitted_fields_are_left_out_when_unset(self):
        params = to_params(build(scf.PublishVersionRequest, FunctionName="hello", Namespace="demo"))

        assert params == {"FunctionName": "hello", "Namespace": "demo"}

    def test_omitted_fields_are_sent_when_set(self):
        params = to_params(build(scf.PublishVersionRequest, FunctionName="hello", Namespace="demo",
                                 Description="v2"))

        assert params["Description"] == "v2"

    def test_nested_models_serialize_themselves(self):
        req = build(
            scf.CreateAliasRequest,
            Name="live",
            RoutingConfig=build(
                scf.RoutingConfig,
                AdditionalVersionWeights=[build(scf.VersionWeight, Version="2", Weight=0.1)],
            ),
        )

        routing = to_params(req)["RoutingConfig"]

        assert routing == {
            "AdditionalVersionWeights": [{"Version": "2", "Weight": 0.1}],
            "AddtionVersionMatchs": None,
        }

    def test_each_operation_carries_only_its_own_fields(self):
        create = to_params(build(scf.CreateFunctionRequest))
        update = to_params(build(scf.UpdateFunctionConfigurationRequest))

        assert "Code" in create and "Handler" in create
        assert "Code" not in update and "Handler" not in update
        assert "Publish" in update and "L5Enable" in update

    def test_sub_domain_payloads(self):
        bind = to_params(build(apigateway.BindSubDomainRequest, ServiceId="service-1"))
        modify = to_params(build(apigateway.ModifySubDomainRequest, ServiceId="service-1"))

        assert "NetSubDomain" in bind
        assert "NetSubDomain" not in modify

    def test_oauth_config_is_omitted_unless_configured(self):
        create = to_params(build(apigateway.CreateApiRequest, ApiName="hello"))
        modify = to_params(build(apigateway.ModifyApiRequest, ApiId="api-1",
                                 OauthConfig=build(apigateway.OauthConfig, PublicKey="pk")))

        assert "OauthConfig" not in create
        assert create["ServiceType"] is None
        assert modify["OauthConfig"]["PublicKey"] == "pk"

    def test_sub_domain_listing_drops_paging_when_unset(self):
        params = to_params(build(apigateway.DescribeServiceSubDomainsRequest, ServiceId="service-1"))

        assert params == {"ServiceId": "service-1"}


@pytest.mark.parametrize("request_cls, client_cls", [
    (scf.ListNamespacesRequest, scf_client.ScfClient),
    (scf.CreateNamespaceRequest, scf_client.ScfClient),
    (scf.UpdateNamespaceRequest, scf_client.ScfClient),
    (scf.GetFunctionRequest, scf_client.ScfClient),
    (scf.CreateFunctionRequest, scf_client.ScfClient),
    (scf.UpdateFunctionCodeRequest, scf_client.ScfClient),
    (scf.UpdateFunctionConfigurationRequest, scf_client.ScfClient),
    (scf.PublishVersionRequest, scf_client.ScfClient),
    (scf.GetAliasRequest, scf_client.ScfClient),
    (scf.CreateAliasRequest, scf_client.ScfClient),
    (scf.UpdateAliasRequest, scf_client.ScfClient),
    (apigateway.DescribeServicesStatusRequest, apigateway_client.ApigatewayClient),
    (apigateway.CreateServiceRequest, apigateway_client.ApigatewayClient),
    (apigateway.ModifyServiceRequest, apigateway_client.ApigatewayClient),
    (apigateway.DescribeApisStatusRequest, apigateway_client.ApigatewayClient),
    (apigateway.CreateApiRequest, apigateway_client.ApigatewayClient),
    (apigateway.ModifyApiRequest, apigateway_client.ApigatewayClient),
    (apigateway.DescribeServiceSubDomainsRequest, apigateway_client.ApigatewayClient),
    (apigateway.BindSubDomainRequest, apigateway_client.ApigatewayClient),
    (apigateway.ModifySubDomainRequest, apigateway_client.ApigatewayClient),
    (apigateway.DescribeUsagePlansStatusRequest, apigateway_client.ApigatewayClient),
    (apigateway.CreateUsagePlanRequest, apigateway_client.ApigatewayClient),
    (apigateway.ModifyUsagePlanRequest, apigateway_client.ApigatewayClient),
    (apigateway.BindEnvironmentRequest, apigateway_client.ApigatewayClient),
    (apigateway.ModifyApiEnvironmentStrategyRequest, apigateway_client.ApigatewayClient),
    (apigateway.ReleaseServiceRequest, apigateway_client.ApigatewayClient),
])
def test_every_request_names_an_action_of_its_client(request_cls, client_cls):
    assert hasattr(client_cls, action_of(request_cls()))
