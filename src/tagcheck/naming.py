"""Field metadata tags and display-name resolution.

Records declare per-field tags as a plain string mapping::

    @dataclass
    class Server:
        zone: str = field(default="", metadata=tags(validate="required,zone", name="zone"))

    class Disk(BaseModel):
        size: int = Field(0, json_schema_extra=tags(validate="min=20", yaml="size_gb"))
"""

from collections.abc import Callable, Mapping
from dataclasses import Field as DataclassField

from pydantic.fields import FieldInfo

from .config import TagConfig

NamingFunc = Callable[[Mapping[str, str]], str]

_DEFAULT_TAGS = TagConfig()


def tags(**kwargs: str) -> dict[str, str]:
    """Build a tag mapping for ``field(metadata=...)`` or ``Field(json_schema_extra=...)``."""
    return {key: str(value) for key, value in kwargs.items()}


def read_field_tags(field: DataclassField | FieldInfo) -> Mapping[str, str]:
    """Return the tag mapping declared on a dataclass or pydantic field."""
    if isinstance(field, FieldInfo):
        extra = field.json_schema_extra
        if isinstance(extra, Mapping):
            return {k: v for k, v in extra.items() if isinstance(v, str)}
        return {}
    metadata = getattr(field, "metadata", None)
    if not metadata:
        return {}
    return {k: v for k, v in metadata.items() if isinstance(k, str) and isinstance(v, str)}


def _first_segment(value: str, separator: str) -> str:
    return value.split(separator, 1)[0]


def resolve_field_name(field_tags: Mapping[str, str], config: TagConfig | None = None) -> str:
    """Resolve the display name of a field from its tags.

    The primary name tag wins, then the fallback tag; only the part before
    the first separator counts (``"zone,omitempty"`` -> ``"zone"``).
    Returns ``""`` when the resolved name is the hidden marker.
    """
    config = config or _DEFAULT_TAGS
    name = _first_segment(field_tags.get(config.name_tag, ""), config.separator)
    if name == "":
        name = _first_segment(field_tags.get(config.fallback_tag, ""), config.separator)
    if name == config.hidden_marker:
        return ""
    return name


def naming_func(config: TagConfig | None = None) -> NamingFunc:
    """Bind ``resolve_field_name`` to a tag configuration."""
    config = config or _DEFAULT_TAGS

    def resolve(field_tags: Mapping[str, str]) -> str:
        return resolve_field_name(field_tags, config)

    return resolve
