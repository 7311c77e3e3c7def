"""Translate validated rule documents into immutable phase rules."""

from __future__ import annotations

import tomllib
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from phaserules.config.errors import ConfigurationError
from phaserules.domain.rules import (
    Matcher,
    PhaseRule,
    condition_equals,
    conditions_all,
    conditions_any,
)

from .schema import MatcherSpec, RuleDocument

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = getLogger(__name__)


class RuleConfigurationError(ConfigurationError):
    """Raised when a rule document cannot be parsed or validated."""


def build_matcher(spec: MatcherSpec) -> Matcher:
    if spec.condition is not None:
        return condition_equals(spec.condition, *(spec.statuses or ()))
    if spec.all is not None:
        return conditions_all(*(build_matcher(child) for child in spec.all))
    return conditions_any(*(build_matcher(child) for child in spec.any or ()))


def build_rules(document: RuleDocument) -> tuple[PhaseRule, ...]:
    return tuple(
        PhaseRule(phase=rule.phase, matcher=build_matcher(rule.match)) for rule in document.rules
    )


def parse_rules(payload: Mapping[str, object]) -> tuple[PhaseRule, ...]:
    """Validate a decoded rule document and compile it."""

    try:
        document = RuleDocument.model_validate(payload)
    except ValidationError as exc:
        raise RuleConfigurationError(f"Invalid rule document: {exc}") from exc
    return build_rules(document)


def load_rules(path: Path) -> tuple[PhaseRule, ...]:
    """Read and compile the TOML rule file at ``path``."""

    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise RuleConfigurationError(f"Rule file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise RuleConfigurationError(f"Rule file {path} is not valid TOML: {exc}") from exc

    rules = parse_rules(payload)
    log.info("Loaded %s phase rules from %s", len(rules), path)
    return rules
