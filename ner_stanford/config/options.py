"""
Worker option configurations for the Stanford NER bridge.

Options are plain dicts with the installation path, the jar and the classifier
to load, built from the defaults in settings and any caller overrides.
"""

from typing import Dict, Optional
from .settings import DEFAULT_INSTALL_PATH, DEFAULT_JAR, DEFAULT_CLASSIFIER

DEFAULT_OPTIONS = {
    "install_path": DEFAULT_INSTALL_PATH,
    "jar": DEFAULT_JAR,
    "classifier": DEFAULT_CLASSIFIER
}

def build_options(install_path: Optional[str] = None, jar: Optional[str] = None,
                  classifier: Optional[str] = None) -> Dict[str, str]:
    """Build an options dict, applying trimmed overrides on top of the defaults."""
    options = DEFAULT_OPTIONS.copy()

    if install_path:
        options["install_path"] = install_path.strip()
    if jar:
        options["jar"] = jar.strip()
    if classifier:
        options["classifier"] = classifier.strip()

    return options

def validate_options(options: dict) -> bool:
    """Validate that an options dict has all required, non-empty values."""
    for key in DEFAULT_OPTIONS:
        if key not in options:
            return False
        if not isinstance(options[key], str) or not options[key].strip():
            return False

    return True
