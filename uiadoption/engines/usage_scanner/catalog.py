"""Package names, the component catalog, and per-variant scan profiles."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from uiadoption.core.config import LineagePatterns
from uiadoption.engines.usage_scanner.models import LibraryVariant

REACT_UI_PACKAGE = "@abgov/react-components"
ANGULAR_UI_PACKAGE = "@abgov/angular-components"
WEB_COMPONENTS_PACKAGE = "@abgov/web-components"
VUE_UI_PACKAGE = "@abgov/vue-components"

REACT_PACKAGES = ("react",)
ANGULAR_PACKAGES = ("@angular/core", "angular/core")
VUE_PACKAGES = ("vue",)

COMPONENTS: tuple[str, ...] = (
    "accordion",
    "badge",
    "button",
    "button-group",
    "callout",
    "checkbox",
    "chip",
    "circular-progress",
    "container",
    "details",
    "dropdown",
    "form-stepper",
    "hero-banner",
    "icon",
    "icon-button",
    "input",
    "modal",
    "notification",
    "pagination",
    "popover",
    "radio",
    "skeleton",
    "table",
    "textarea",
    "app-footer",
    "app-header",
    "microsite-header",
    "block",
    "divider",
    "form-item",
    "grid",
    "spacer",
    "one-column-layout",
    "two-column-layout",
)

# The React library exports GoATextArea while the catalog says "textarea".
_REACT_SPELLING_OVERRIDES = {"textarea": "text-area"}


def react_tag(component: str) -> str:
    """``icon-button`` -> ``GoAIconButton``."""
    name = _REACT_SPELLING_OVERRIDES.get(component, component)
    return "GoA" + "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", name) if part)


def element_tag(component: str) -> str:
    """``icon-button`` -> ``goa-icon-button``."""
    return f"goa-{component.lower()}"


@dataclass(frozen=True)
class ScanProfile:
    """How a UI-library variant's versions are extracted and components counted."""

    package: str
    extensions: tuple[str, ...]
    tag_for: Callable[[str], str]
    pattern: re.Pattern[str] | None = None


def scan_profile(variant: LibraryVariant, patterns: LineagePatterns) -> ScanProfile | None:
    """Return the profile for a UI-library variant, ``None`` for any other."""
    if variant is LibraryVariant.REACT_UIC:
        return ScanProfile(REACT_UI_PACKAGE, (".tsx", ".jsx"), react_tag, patterns.react)
    if variant is LibraryVariant.ANGULAR_UIC:
        return ScanProfile(ANGULAR_UI_PACKAGE, (".html",), element_tag, patterns.angular)
    if variant is LibraryVariant.VUE_UIC:
        return ScanProfile(WEB_COMPONENTS_PACKAGE, (".vue",), element_tag, patterns.vue)
    if variant is LibraryVariant.WC_UIC:
        return ScanProfile(WEB_COMPONENTS_PACKAGE, (".html",), element_tag)
    return None
