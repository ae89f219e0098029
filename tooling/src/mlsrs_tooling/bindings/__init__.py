"""Binding generation (uniffi-bindgen) and module map relocation."""

from .uniffi import bindgen_task, relocate_modulemap_task

__all__ = [
    "bindgen_task",
    "relocate_modulemap_task",
]
