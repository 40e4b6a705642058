"""Response validation for proxied requests."""

from proxybench.validation.validator import JsonKind, ResponseValidator, kind_of, resolve_path

__all__ = ["JsonKind", "ResponseValidator", "kind_of", "resolve_path"]
