"""Dialog module with lazy imports to avoid import-time side effects."""

import importlib

__all__ = [
    "ExportDialog",
    "PreferencesDialog",
]

# Lazy import mapping: name -> (module_path, class_name)
_LAZY_IMPORTS = {
    "ExportDialog": (".export", "ExportDialog"),
    "PreferencesDialog": (".preferences", "PreferencesDialog"),
}


def __getattr__(name: str):
    """Lazy import for dialog classes."""
    if name in _LAZY_IMPORTS:
        module_path, class_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(f"{__name__}.{module_path.lstrip('.')}")
        return getattr(module, class_name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
