from __future__ import annotations

"""
Scanner configuration: which rules are enabled, how they are instantiated, and
the project-level settings read from vue-health.config.json.

RULE_CLASSES is the closed registry of rules the engine knows about. A project
config can turn a rule off, change its severity, or pass options, using the
linter convention:

    {
      "ignore": {"rules": ["vue/no-v-html"], "files": ["src/legacy/"]},
      "rules": {
        "vue-health/no-giant-component": ["warn", {"threshold": 500}],
        "vue-health/require-emits-declaration": "off"
      }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from vuehealth.findings.models import IgnoreConfig, Severity
from vuehealth.rules.base import Rule
from vuehealth.rules.no_async_watcheffect import NoAsyncWatchEffectRule
from vuehealth.rules.no_expensive_inline_expression import NoExpensiveInlineExpressionRule
from vuehealth.rules.no_giant_component import NoGiantComponentRule
from vuehealth.rules.no_index_as_key import NoIndexAsKeyRule
from vuehealth.rules.no_reactive_destructure import NoReactiveDestructureRule
from vuehealth.rules.no_ref_in_computed import NoRefInComputedRule
from vuehealth.rules.no_secrets_in_client import NoSecretsInClientRule
from vuehealth.rules.require_emits_declaration import RequireEmitsDeclarationRule

logger = logging.getLogger(__name__)

RULE_CLASSES: tuple[type[Rule], ...] = (
    NoReactiveDestructureRule,
    NoRefInComputedRule,
    NoAsyncWatchEffectRule,
    NoIndexAsKeyRule,
    NoExpensiveInlineExpressionRule,
    NoGiantComponentRule,
    NoSecretsInClientRule,
    RequireEmitsDeclarationRule,
)

CONFIG_FILENAMES = (
    "vue-health.config.json",
    ".vue-health.json",
)
PACKAGE_JSON_KEY = "vue-health"

_SEVERITY_ALIASES: dict[Union[str, int], Optional[Severity]] = {
    "off": None,
    0: None,
    "warn": "warning",
    "warning": "warning",
    1: "warning",
    "error": "error",
    2: "error",
}

RuleSetting = Union[str, int, List[Any]]


class ConfigError(ValueError):
    """Raised when a project config file cannot be read or does not validate."""


class ProjectConfig(BaseModel):
    """Project-level settings; field names accept the camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    ignore: Optional[IgnoreConfig] = None
    lint: bool = True
    dead_code: bool = True
    verbose: bool = False
    rules: dict[str, RuleSetting] = Field(default_factory=dict)


@dataclass
class Config:
    """
    Scanner configuration: the activated rules plus the ignore settings used
    when filtering diagnostics.
    """

    rules: Sequence[Rule] = field(default_factory=list)
    ignore: Optional[IgnoreConfig] = None


def _resolve_setting(rule_cls: type[Rule], setting: RuleSetting) -> tuple[Optional[Severity], list[Any]]:
    if isinstance(setting, list):
        if not setting:
            raise ConfigError(f"Empty setting for rule {rule_cls.id}")
        level, options = setting[0], list(setting[1:])
    else:
        level, options = setting, []
    if not isinstance(level, (str, int)) or level not in _SEVERITY_ALIASES:
        raise ConfigError(f"Unknown severity {level!r} for rule {rule_cls.id}")
    return _SEVERITY_ALIASES[level], options


def build_rules(overrides: Optional[dict[str, RuleSetting]] = None) -> list[Rule]:
    """
    Instantiate every registered rule, applying per-rule overrides.

    Rule options are validated against each rule's schema here, so an invalid
    option raises RuleConfigurationError before any file is traversed.
    """
    overrides = dict(overrides or {})
    rules: List[Rule] = []
    for rule_cls in RULE_CLASSES:
        key = f"vue-health/{rule_cls.id}"
        setting = overrides.pop(key, overrides.pop(rule_cls.id, None))
        if setting is None:
            rules.append(rule_cls())
            continue
        severity, options = _resolve_setting(rule_cls, setting)
        if severity is None:
            logger.info("Rule %s disabled by configuration", key)
            continue
        rules.append(rule_cls(options=options, severity=severity))
    for unknown in overrides:
        logger.warning("Ignoring setting for unknown rule %s", unknown)
    return rules


def get_default_config() -> Config:
    """
    Return the default configuration with every rule at its recommended severity.

    This is what the CLI in main.py uses when the project has no config file.
    """
    return Config(rules=build_rules())


def config_from_project(project: Optional[ProjectConfig]) -> Config:
    if project is None:
        return get_default_config()
    return Config(rules=build_rules(project.rules), ignore=project.ignore)


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the list of enabled rules from the given config (or default config)."""
    if config is None:
        config = get_default_config()
    return config.rules


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e


def _validate(data: Any, origin: Path) -> ProjectConfig:
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {origin}: {e}") from e


def load_config(root: Path) -> Optional[ProjectConfig]:
    """
    Find and load the project config under root.

    Looks for vue-health.config.json, then .vue-health.json, then a
    "vue-health" key in package.json. Returns None when none is present.
    """
    for filename in CONFIG_FILENAMES:
        path = root / filename
        if path.is_file():
            logger.info("Loading config from %s", path)
            return _validate(_read_json(path), path)

    package_json = root / "package.json"
    if package_json.is_file():
        data = _read_json(package_json)
        if isinstance(data, dict) and data.get(PACKAGE_JSON_KEY):
            logger.info("Loading config from %s (%s key)", package_json, PACKAGE_JSON_KEY)
            return _validate(data[PACKAGE_JSON_KEY], package_json)

    logger.debug("No config found under %s", root)
    return None
