"""
Template Loading - parses and validates a deployment template.

Templates follow the serverless.yml layout: a ``service`` name, a
``provider`` block (stage, ssot), autotasks under ``functions`` and the
other kinds under ``resources.Resources``. Local names must be unique per
kind; YAML documents with duplicate keys are rejected outright.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from adapters.base import LocalDeclaration
from identity import IDENTITY_SEPARATOR
from validation import validate_declaration

logger = logging.getLogger(__name__)

# Deploy order; later kinds reference ids produced by earlier ones
RESOURCE_KINDS = (
    "secrets",
    "contracts",
    "relayers",
    "autotasks",
    "notifications",
    "sentinels",
)

SERVICE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class TemplateError(Exception):
    """Raised when a template cannot be loaded or is invalid."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects mappings with duplicate keys."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                raise TemplateError(
                    f"Unhashable key at line {key_node.start_mark.line + 1}"
                )
            if duplicate:
                raise TemplateError(
                    f"Duplicate key '{key}' at line {key_node.start_mark.line + 1}"
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def validate_local_name(value: str) -> str:
    """Validate that a local name can form a stable identity."""
    if not value:
        raise ValueError("Local name cannot be empty")
    if IDENTITY_SEPARATOR in value:
        raise ValueError(
            f"Local name '{value}' cannot contain '{IDENTITY_SEPARATOR}'"
        )
    return value


def _none_as_empty(value: Any) -> Any:
    return {} if value is None else value


class ProviderModel(BaseModel):
    """The ``provider`` block."""

    stage: str = "dev"
    ssot: bool = False


class ResourceKindsModel(BaseModel):
    """The ``resources.Resources`` block."""

    model_config = ConfigDict(extra="allow")

    secrets: Dict[str, Any] = Field(default_factory=dict)
    contracts: Dict[str, Any] = Field(default_factory=dict)
    relayers: Dict[str, Any] = Field(default_factory=dict)
    notifications: Dict[str, Any] = Field(default_factory=dict)
    sentinels: Dict[str, Any] = Field(default_factory=dict)

    @field_validator(
        "secrets", "contracts", "relayers", "notifications", "sentinels", mode="before"
    )
    @classmethod
    def empty_section(cls, v: Any) -> Any:
        return _none_as_empty(v)


class ResourcesModel(BaseModel):
    """The ``resources`` block."""

    Resources: ResourceKindsModel = Field(default_factory=ResourceKindsModel)

    @field_validator("Resources", mode="before")
    @classmethod
    def empty_section(cls, v: Any) -> Any:
        return _none_as_empty(v)


class TemplateModel(BaseModel):
    """Top-level template document."""

    model_config = ConfigDict(extra="allow")

    service: str
    provider: ProviderModel = Field(default_factory=ProviderModel)
    functions: Dict[str, Any] = Field(default_factory=dict)
    resources: ResourcesModel = Field(default_factory=ResourcesModel)

    @field_validator("service")
    @classmethod
    def validate_service(cls, v: str) -> str:
        if not SERVICE_PATTERN.match(v):
            raise ValueError(
                "service must consist of alphanumeric characters, '-' or '_'"
            )
        return v

    @field_validator("provider", "functions", "resources", mode="before")
    @classmethod
    def empty_section(cls, v: Any) -> Any:
        return _none_as_empty(v)


@dataclass
class Template:
    """A validated template, ready for deployment."""

    service: str
    stage: str
    ssot: bool
    resources: Dict[str, List[LocalDeclaration]] = field(default_factory=dict)

    @property
    def stack(self) -> str:
        """Stack name; namespaces every stable identity of this template."""
        return f"{self.service}-{self.stage}"

    def declarations(self, kind: str) -> List[LocalDeclaration]:
        """Template entries of a kind, in template order."""
        return list(self.resources.get(kind, []))


def parse_template(
    text: str,
    stage: Optional[str] = None,
    ssot: Optional[bool] = None,
) -> Template:
    """
    Parse and validate a template document.

    Args:
        text: YAML (or JSON) template text.
        stage: Overrides ``provider.stage`` when given.
        ssot: Overrides ``provider.ssot`` when given.

    Returns:
        The validated Template.

    Raises:
        TemplateError: If the document is malformed or invalid.
    """
    try:
        document = yaml.load(text, Loader=UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise TemplateError(f"Invalid YAML: {e}") from e

    if not isinstance(document, dict):
        raise TemplateError("Template must be a mapping")

    try:
        model = TemplateModel.model_validate(document)
    except ValidationError as e:
        raise TemplateError(f"Invalid template: {e}") from e

    kinds = model.resources.Resources
    sections = {
        "secrets": kinds.secrets,
        "contracts": kinds.contracts,
        "relayers": kinds.relayers,
        "autotasks": model.functions,
        "notifications": kinds.notifications,
        "sentinels": kinds.sentinels,
    }

    errors = []
    resources: Dict[str, List[LocalDeclaration]] = {}
    for kind in RESOURCE_KINDS:
        resources[kind] = []
        for name, spec in sections[kind].items():
            name = str(name)
            try:
                validate_local_name(name)
            except ValueError as e:
                errors.append(f"{kind}.{name}: {e}")
                continue
            is_valid, error = validate_declaration(kind, spec)
            if not is_valid:
                errors.append(f"{kind}.{name}: {error}")
                continue
            resources[kind].append(LocalDeclaration(name=name, spec=spec))

    if errors:
        raise TemplateError("Invalid template: " + "; ".join(errors))

    template = Template(
        service=model.service,
        stage=stage or model.provider.stage,
        ssot=model.provider.ssot if ssot is None else ssot,
        resources=resources,
    )
    logger.debug(
        f"Loaded template for stack {template.stack}: "
        + ", ".join(f"{k}={len(v)}" for k, v in resources.items())
    )
    return template


def load_template(
    path: str,
    stage: Optional[str] = None,
    ssot: Optional[bool] = None,
) -> Template:
    """
    Load and validate a template file.

    Raises:
        TemplateError: If the file cannot be read or is invalid.
    """
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise TemplateError(f"Cannot read template {path}: {e}") from e
    return parse_template(text, stage=stage, ssot=ssot)
