"""Deployment packaging exports."""

from .deployment_models import DeploymentRequest, DeploymentUnit
from .packager import DEPLOY_ENDPOINT, build_deployment_request, package_deployment_units

__all__ = [
    "DEPLOY_ENDPOINT",
    "DeploymentRequest",
    "DeploymentUnit",
    "build_deployment_request",
    "package_deployment_units",
]
