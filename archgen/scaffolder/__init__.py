"""archgen scaffolder -- renders per-entity source artifacts from templates.

Quick usage::

    from archgen.models import CrudDetails, EntityProperty
    from archgen.scaffolder import CrudGenerator

    details = CrudDetails(
        entity_name="Order",
        pattern="cqrs",
        properties=[EntityProperty(name="Total", type="decimal", is_required=True)],
    )
    written = await CrudGenerator().generate_all("/tmp/Shop", details)
"""

from archgen.scaffolder.crud_gen import CrudGenerator, validate_details
from archgen.scaffolder.endpoint_gen import EndpointGenerator, validate_endpoint
from archgen.scaffolder.profiles import (
    FAMILY_KEYS,
    PROFILES,
    ArtifactFamily,
    GenerationStep,
    Layer,
    Pattern,
    PatternProfile,
    profile_for,
    steps_for,
)
from archgen.scaffolder.templates import TemplateRenderer, substitute
from archgen.scaffolder.unit_of_work import GenerationUnit

__all__ = [
    "FAMILY_KEYS",
    "PROFILES",
    "ArtifactFamily",
    "CrudGenerator",
    "EndpointGenerator",
    "GenerationStep",
    "GenerationUnit",
    "Layer",
    "Pattern",
    "PatternProfile",
    "TemplateRenderer",
    "profile_for",
    "steps_for",
    "substitute",
    "validate_details",
    "validate_endpoint",
]
