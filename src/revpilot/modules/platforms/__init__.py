from revpilot.modules.platforms.rules import (
    PLATFORM_RULES,
    Anchor,
    PlatformRule,
    anchor_date,
    attribution_anchor,
    deferral_rule,
    resolve_rule,
)

__all__ = [
    "PLATFORM_RULES",
    "Anchor",
    "PlatformRule",
    "anchor_date",
    "attribution_anchor",
    "deferral_rule",
    "resolve_rule",
]
