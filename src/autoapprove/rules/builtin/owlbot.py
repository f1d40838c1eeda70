"""OwlBot rules — regenerated client libraries and synced templates."""

from autoapprove.rules.extras import (
    ARE_THERE_OTHER_PRS_FROM_AUTHOR,
    IS_GAPIC,
    NO_OTHER_COMMIT_AUTHORS,
    NO_OTHER_PRS_FROM_AUTHOR,
)
from autoapprove.rules.models import Exact, NotPattern, Pattern, Rule

OWLBOT_AUTHOR = "gcf-owl-bot[bot]"

# Matches an anti-pattern: a purely mechanical regeneration with no breaking
# marker, no concurrent OwlBot PRs and nobody else committing on top.
OWLBOT_API_CHANGES = Rule(
    id="OWLBOT_API_CHANGES",
    name="OwlBot API Changes",
    description="Non-breaking GAPIC regeneration from a single upstream change.",
    author=Exact(OWLBOT_AUTHOR),
    title=NotPattern(r"(breaking|BREAKING|!)"),
    body=Pattern(r"PiperOrigin-RevId"),
    extra_checks=(
        IS_GAPIC,
        ARE_THERE_OTHER_PRS_FROM_AUTHOR,
        NO_OTHER_PRS_FROM_AUTHOR,
        NO_OTHER_COMMIT_AUTHORS,
    ),
)

OWLBOT_TEMPLATE_CHANGES = Rule(
    id="OWLBOT_TEMPLATE_CHANGES",
    name="OwlBot Template Changes",
    description="Template sync flagged [autoapprove] that carries no API change.",
    author=Exact(OWLBOT_AUTHOR),
    title=Pattern(r"\[autoapprove\]"),
    body=NotPattern(r"PiperOrigin-RevId"),
    extra_checks=(NO_OTHER_COMMIT_AUTHORS,),
)

ALL_OWLBOT_RULES = [OWLBOT_API_CHANGES, OWLBOT_TEMPLATE_CHANGES]
