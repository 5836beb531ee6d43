#!/usr/bin/env python3
"""
Request models for the SCF and API Gateway management APIs.

Requests are the model classes shipped with tencentcloud-sdk-python, so every
request carries exactly the fields its operation accepts. ``build`` fills one
in by keyword and rejects names the model does not define. ``to_params`` turns
a request into the JSON payload handed to ``call_json``: a field left as
``None`` is sent as an explicit JSON ``null``, which the remote APIs read as
"unset", except for the few fields listed in ``OMITTED``, which are left out
of the payload entirely when unset.
"""

from typing import Any, Dict, Type, TypeVar

from tencentcloud.apigateway.v20180808 import models as apigateway
from tencentcloud.common.abstract_model import AbstractModel
from tencentcloud.scf.v20180416 import models as scf

__all__ = ["OMITTED", "action_of", "apigateway", "build", "scf", "to_params"]

M = TypeVar("M", bound=AbstractModel)

# Fields dropped from the payload when unset, by action
OMITTED = {
    "PublishVersion": ("Description",),
    "DescribeServiceSubDomains": ("Limit", "Offset"),
    "CreateApi": ("OauthConfig",),
    "ModifyApi": ("OauthConfig",),
}


def build(model_cls: Type[M], **fields) -> M:
    """
    Instantiate an SDK model and assign its fields by name.

    Args:
        model_cls: A request or structure class from the SDK models modules
        fields: Field values keyed by their API names (FunctionName, ...)

    Raises:
        TypeError: If a name is not a field of ``model_cls``
    """
    model = model_cls()
    for name, value in fields.items():
        if name == "headers" or not isinstance(getattr(model_cls, name, None), property):
            raise TypeError(f"{model_cls.__name__} has no field {name!r}")
        setattr(model, name, value)
    return model


def action_of(request: AbstractModel) -> str:
    """The API action a request is sent with: ``GetFunctionRequest`` -> ``GetFunction``."""
    return type(request).__name__[:-len("Request")]


def to_params(request: AbstractModel) -> Dict[str, Any]:
    params = request._serialize(allow_none=True)
    for name in OMITTED.get(action_of(request), ()):
        if params.get(name) is None:
            params.pop(name, None)
    return params
