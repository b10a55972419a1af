"""Configuration management for tagcheck using Pydantic models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TagConfig(BaseModel):
    """Names of the metadata tags read from record fields."""
    rule_tag: str = Field(alias="ruleTag", default="validate")
    name_tag: str = Field(alias="nameTag", default="name")
    fallback_tag: str = Field(alias="fallbackTag", default="yaml")
    hidden_marker: str = Field(alias="hiddenMarker", default="-")
    separator: str = ","

    @field_validator("rule_tag", "name_tag", "fallback_tag", "hidden_marker")
    @classmethod
    def validate_not_empty(cls, v):
        if not v:
            raise ValueError("tag names must not be empty")
        return v

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v):
        if len(v) != 1:
            raise ValueError(f"separator must be a single character, got: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_distinct_tags(self):
        names = [self.rule_tag, self.name_tag, self.fallback_tag]
        if len(set(names)) != len(names):
            raise ValueError(f"rule, name and fallback tags must differ, got: {names}")
        return self

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TagcheckConfig(BaseModel):
    """Complete tagcheck configuration model."""
    tags: TagConfig = Field(default_factory=TagConfig)

    model_config = ConfigDict(extra="forbid")

