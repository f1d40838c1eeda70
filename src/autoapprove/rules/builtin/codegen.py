"""Code generator rules — discovery documents and Apiary clients."""

from autoapprove.rules.models import Exact, Pattern, Rule

YOSHI_AUTHOR = "yoshi-code-bot"

UPDATE_DISCOVERY_ARTIFACTS = Rule(
    id="UPDATE_DISCOVERY_ARTIFACTS",
    name="Update Discovery Artifacts",
    description="Refreshed discovery documents and their generated HTML docs.",
    author=Exact(YOSHI_AUTHOR),
    title=Pattern(r"^chore: Update discovery artifacts"),
    file_patterns=(
        Pattern(r"^docs/dyn/index\.md$"),
        Pattern(r"^docs/dyn/.*\.html$"),
        Pattern(r"^googleapiclient/discovery_cache/documents/.*\.json$"),
    ),
)

PHP_APIARY_CODEGEN = Rule(
    id="PHP_APIARY_CODEGEN",
    name="PHP Apiary Codegen",
    description="Regenerated PHP Apiary client.",
    author=Exact(YOSHI_AUTHOR),
    title=Pattern(r"^Regenerate .* client$"),
)

JAVA_APIARY_CODEGEN = Rule(
    id="JAVA_APIARY_CODEGEN",
    name="Java Apiary Codegen",
    description="Regenerated Java Apiary client.",
    author=Exact(YOSHI_AUTHOR),
    title=Pattern(r"^chore: regenerate .* client$"),
)

GO_APIARY_CODEGEN = Rule(
    id="GO_APIARY_CODEGEN",
    name="Go Apiary Codegen",
    description="Regenerated Go discovery clients.",
    author=Exact(YOSHI_AUTHOR),
    title=Pattern(r"^(feat|chore)\(all\): auto-regenerate discovery clients"),
)

ALL_CODEGEN_RULES = [
    UPDATE_DISCOVERY_ARTIFACTS,
    PHP_APIARY_CODEGEN,
    JAVA_APIARY_CODEGEN,
    GO_APIARY_CODEGEN,
]
