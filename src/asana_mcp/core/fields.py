from __future__ import annotations

from typing import Dict, Optional

from .params import ListLike, split_list

OPT_FIELDS_PARAM = "opt_fields"


def build_opt_fields(
    opt_fields: ListLike = None, *, default: Optional[str] = None
) -> Dict[str, str]:
    """
    Build the opt_fields query parameter.

    Paths are passed through verbatim (nested ones such as "custom_fields.name"
    included); the backend rejects unknown fields. Returns {} when neither a
    projection nor a default is given, so the backend's default field set applies.
    """
    fields = split_list(opt_fields, name=OPT_FIELDS_PARAM)
    if not fields and default:
        fields = split_list(default, name=OPT_FIELDS_PARAM)
    if not fields:
        return {}
    return {OPT_FIELDS_PARAM: ",".join(fields)}


def with_opt_fields(
    params: Dict[str, object], opt_fields: ListLike = None, **kwargs
) -> Dict[str, object]:
    """Return params merged with the projection for opt_fields."""
    merged = dict(params)
    merged.update(build_opt_fields(opt_fields, **kwargs))
    return merged


__all__ = ["OPT_FIELDS_PARAM", "build_opt_fields", "with_opt_fields"]
