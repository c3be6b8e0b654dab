"""Provisioning pipeline for BPB worker deployments"""

from .models import (
    DeployContext,
    DeploymentReport,
    DeploymentSpec,
    FatalFailure,
    ProvisionedResources,
    RetryableFailure,
    StepOutcome,
    Success,
)
from .availability import NameAvailability, check_name_availability
from .bundle import fetch_worker_bundle
from .pipeline import ResourceProvisioner, build_bindings

__all__ = [
    "DeployContext",
    "DeploymentReport",
    "DeploymentSpec",
    "FatalFailure",
    "ProvisionedResources",
    "RetryableFailure",
    "StepOutcome",
    "Success",
    "NameAvailability",
    "check_name_availability",
    "fetch_worker_bundle",
    "ResourceProvisioner",
    "build_bindings",
]
