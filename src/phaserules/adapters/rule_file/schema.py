"""Pydantic models for static phase rule documents.

A document is a list of rules; each rule names a phase and one matcher. A matcher is
exactly one of:

- a leaf: ``{condition = "Ready", statuses = ["True"]}``
- an ALL group: ``{all = [...]}``
- an ANY group: ``{any = [...]}``
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from phaserules.domain.model import ConditionStatus


class RuleFileBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class MatcherSpec(RuleFileBaseModel):
    condition: str | None = Field(default=None, min_length=1)
    statuses: list[ConditionStatus] | None = None
    all: list[MatcherSpec] | None = None
    any: list[MatcherSpec] | None = None

    @model_validator(mode="after")
    def _check_single_form(self) -> Self:
        forms = [
            self.condition is not None,
            self.all is not None,
            self.any is not None,
        ]
        if sum(forms) != 1:
            raise ValueError("matcher must define exactly one of 'condition', 'all' or 'any'")
        if self.condition is None and self.statuses is not None:
            raise ValueError("'statuses' is only valid together with 'condition'")
        if self.condition is not None and not self.statuses:
            raise ValueError(f"condition {self.condition!r} requires at least one status")
        return self


class RuleSpec(RuleFileBaseModel):
    phase: str = Field(min_length=1)
    match: MatcherSpec


class RuleDocument(RuleFileBaseModel):
    rules: list[RuleSpec] = Field(default_factory=list["RuleSpec"])
