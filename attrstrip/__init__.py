"""Strip a named attribute from bracketed attribute lists in source files."""

from __future__ import annotations

from attrstrip.rewriter import RewriteResult, check_attribute_name, rewrite

DEFAULT_ATTRIBUTE = "FormerlySerializedAs"

__all__ = ["DEFAULT_ATTRIBUTE", "RewriteResult", "check_attribute_name", "rewrite"]
