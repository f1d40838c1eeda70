"""Tests for rule evaluation — the pure check, the async evaluate, and batches."""

import json
from dataclasses import replace

import pytest

from autoapprove.checks.engine import check_rule, evaluate, evaluate_all
from autoapprove.checks.gather import LookupFailed
from autoapprove.checks.models import PRFacts
from autoapprove.github.client import NotFoundError
from autoapprove.github.models import ChangedFile, PullRequest
from autoapprove.rules.builtin import ALL_BUILTIN_RULES
from autoapprove.rules.builtin.codegen import PHP_APIARY_CODEGEN, UPDATE_DISCOVERY_ARTIFACTS
from autoapprove.rules.builtin.dependencies import NODE_DEPENDENCY, PYTHON_DEPENDENCY
from autoapprove.rules.builtin.owlbot import OWLBOT_API_CHANGES, OWLBOT_TEMPLATE_CHANGES
from autoapprove.rules.models import Pattern, Rule


class Recorder:
    """Reporter that keeps every call instead of logging."""

    def __init__(self):
        self.calls = []

    def __call__(self, names, outcomes, owner, repo, number):
        self.calls.append((list(names), list(outcomes), owner, repo, number))


@pytest.fixture
def owlbot_source(make_source, gapic_metadata):
    return make_source(
        files={".repo-metadata.json": gapic_metadata},
        commit_authors=["gcf-owl-bot[bot]", "gcf-owl-bot[bot]"],
        open_prs=1,
    )


class TestCheckRule:
    """The pure part of evaluation needs no network at all."""

    def test_unconstrained_rule_matches_anything(self, owlbot_pr, discovery_pr):
        rule = Rule(id="ANY", name="Any", description="")
        for pr in (owlbot_pr, discovery_pr):
            result = check_rule(rule, pr)
            assert result.matched is True
            assert result.as_mapping()["authorship_matches"] is True
            assert result.as_mapping()["file_patterns_match"] is True

    def test_base_criteria_order(self, discovery_pr):
        result = check_rule(UPDATE_DISCOVERY_ARTIFACTS, discovery_pr)
        assert result.names == [
            "authorship_matches",
            "title_matches",
            "body_matches",
            "file_count_matches",
            "file_patterns_match",
        ]

    def test_owlbot_from_facts(self, owlbot_pr):
        facts = PRFacts(
            repo_metadata={"library_type": "GAPIC_AUTO"},
            open_prs_from_author=1,
            commit_authors=("gcf-owl-bot[bot]",),
        )
        result = check_rule(OWLBOT_API_CHANGES, owlbot_pr, facts)
        assert result.matched is True
        assert result.as_mapping()["are_there_other_prs_from_author"] is False

    def test_non_gating_check_does_not_change_verdict(self, owlbot_pr):
        facts = PRFacts(
            repo_metadata={"library_type": "GAPIC_AUTO"},
            open_prs_from_author=2,
            commit_authors=("gcf-owl-bot[bot]",),
        )
        result = check_rule(OWLBOT_API_CHANGES, owlbot_pr, facts)
        assert result.as_mapping()["are_there_other_prs_from_author"] is True
        # Only the gating negation fails the rule.
        assert result.as_mapping()["no_other_prs_from_author"] is False
        assert result.matched is False


class TestOwlBotAPIChanges:
    @pytest.mark.asyncio
    async def test_mechanical_regeneration_matches(self, owlbot_pr, owlbot_source):
        assert await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source) is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title",
        ["feat!: remove deprecated field", "fix: BREAKING change to retries", "breaking: drop v1"],
    )
    async def test_breaking_marker_in_title_fails(self, owlbot_pr, owlbot_source, title):
        pr = replace(owlbot_pr, title=title)
        assert await evaluate(OWLBOT_API_CHANGES, pr, owlbot_source) is False

    @pytest.mark.asyncio
    async def test_second_open_owlbot_pr_fails(self, owlbot_pr, owlbot_source):
        owlbot_source.open_prs = 2
        assert await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source) is False

    @pytest.mark.asyncio
    async def test_foreign_commit_author_fails(self, owlbot_pr, owlbot_source):
        owlbot_source.commit_authors = ["gcf-owl-bot[bot]", "a-human"]
        assert await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source) is False

    @pytest.mark.asyncio
    async def test_unlinked_commit_author_counts_as_foreign(self, owlbot_pr, owlbot_source):
        owlbot_source.commit_authors = ["gcf-owl-bot[bot]", None]
        assert await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source) is False

    @pytest.mark.asyncio
    async def test_non_gapic_library_fails(self, owlbot_pr, owlbot_source):
        owlbot_source.files[".repo-metadata.json"] = json.dumps({"library_type": "OTHER"})
        assert await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source) is False

    @pytest.mark.asyncio
    async def test_missing_body_is_not_a_failure(self, owlbot_pr, owlbot_source):
        pr = replace(owlbot_pr, body=None)
        assert await evaluate(OWLBOT_API_CHANGES, pr, owlbot_source) is True

    @pytest.mark.asyncio
    async def test_reports_every_criterion_even_on_failure(self, owlbot_pr, owlbot_source):
        recorder = Recorder()
        pr = replace(owlbot_pr, author="someone-else")
        assert await evaluate(OWLBOT_API_CHANGES, pr, owlbot_source, reporter=recorder) is False

        assert len(recorder.calls) == 1
        names, outcomes, owner, repo, number = recorder.calls[0]
        assert names == [
            "authorship_matches",
            "title_matches",
            "body_matches",
            "file_count_matches",
            "file_patterns_match",
            "is_gapic",
            "are_there_other_prs_from_author",
            "no_other_prs_from_author",
            "no_other_commit_authors",
        ]
        assert outcomes[0] is False
        assert len(outcomes) == len(names)
        assert (owner, repo, number) == ("googleapis", "python-speech", 101)

    @pytest.mark.asyncio
    async def test_lookup_order(self, owlbot_pr, owlbot_source):
        await evaluate(OWLBOT_API_CHANGES, owlbot_pr, owlbot_source)
        assert owlbot_source.calls == ["file:.repo-metadata.json", "open_prs", "commits"]


class TestLookupFailures:
    @pytest.mark.asyncio
    async def test_missing_metadata_propagates(self, owlbot_pr, make_source):
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])
        with pytest.raises(NotFoundError):
            await evaluate(OWLBOT_API_CHANGES, owlbot_pr, source)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    async def test_malformed_metadata_propagates(self, owlbot_pr, make_source, content):
        source = make_source(files={".repo-metadata.json": content})
        with pytest.raises(LookupFailed):
            await evaluate(OWLBOT_API_CHANGES, owlbot_pr, source)


class TestOwlBotTemplateChanges:
    @pytest.mark.asyncio
    async def test_template_sync_matches(self, owlbot_pr, make_source):
        pr = replace(owlbot_pr, title="chore: update templates [autoapprove]", body="Synced.")
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])
        assert await evaluate(OWLBOT_TEMPLATE_CHANGES, pr, source) is True

    @pytest.mark.asyncio
    async def test_api_change_body_fails(self, owlbot_pr, make_source):
        pr = replace(owlbot_pr, title="chore: update templates [autoapprove]")
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])
        assert await evaluate(OWLBOT_TEMPLATE_CHANGES, pr, source) is False


class TestUpdateDiscoveryArtifacts:
    @pytest.mark.asyncio
    async def test_matches(self, discovery_pr, no_lookups):
        assert await evaluate(UPDATE_DISCOVERY_ARTIFACTS, discovery_pr, no_lookups) is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [0, 1, 2])
    async def test_one_unexpected_file_flips_result(self, discovery_pr, no_lookups, index):
        files = list(discovery_pr.changed_files)
        files[index] = ChangedFile("setup.py", files[index].sha)
        pr = replace(discovery_pr, changed_files=tuple(files))
        assert await evaluate(UPDATE_DISCOVERY_ARTIFACTS, pr, no_lookups) is False

    @pytest.mark.asyncio
    async def test_title_must_have_prefix(self, discovery_pr, no_lookups):
        pr = replace(discovery_pr, title="feat: Update discovery artifacts")
        assert await evaluate(UPDATE_DISCOVERY_ARTIFACTS, pr, no_lookups) is False


class TestPHPApiaryCodegen:
    @pytest.mark.asyncio
    async def test_non_matching_pr(self, no_lookups):
        pr = PullRequest(
            author="testAuthor",
            title="testTitle",
            body="body",
            repo_owner="testRepoOwner",
            repo_name="testRepoName",
            pr_number=1,
            changed_files=(ChangedFile("hello", "2345"),),
            file_count=3,
        )
        assert await evaluate(PHP_APIARY_CODEGEN, pr, no_lookups) is False

    @pytest.mark.asyncio
    async def test_matching_pr(self, no_lookups):
        pr = PullRequest(
            author="yoshi-code-bot",
            title="Regenerate admin client",
            body="body",
            repo_owner="testRepoOwner",
            repo_name="testRepoName",
            pr_number=1,
            changed_files=(ChangedFile("hello", "2345"),),
            file_count=3,
        )
        assert await evaluate(PHP_APIARY_CODEGEN, pr, no_lookups) is True


class TestDependencies:
    @pytest.mark.asyncio
    async def test_python_dependency(self, python_dependency_pr, no_lookups):
        assert await evaluate(PYTHON_DEPENDENCY, python_dependency_pr, no_lookups) is True

    @pytest.mark.asyncio
    async def test_node_dependency(self, node_dependency_pr, no_lookups):
        assert await evaluate(NODE_DEPENDENCY, node_dependency_pr, no_lookups) is True

    @pytest.mark.asyncio
    async def test_extra_major_bump_in_same_file(self, python_dependency_pr, no_lookups):
        requirements = ChangedFile(
            "storage/samples/requirements.txt",
            "9999",
            patch=(
                "@@ -1,2 +1,2 @@\n"
                "-google-cloud-storage==2.9.0\n"
                "-requests==2.31.0\n"
                "+google-cloud-storage==2.10.0\n"
                "+requests==3.0.0\n"
            ),
        )
        pr = replace(python_dependency_pr, changed_files=(requirements,))
        assert await evaluate(PYTHON_DEPENDENCY, pr, no_lookups) is False

    @pytest.mark.asyncio
    async def test_too_many_files(self, python_dependency_pr, no_lookups):
        pr = replace(python_dependency_pr, file_count=4)
        assert await evaluate(PYTHON_DEPENDENCY, pr, no_lookups) is False


class TestEvaluateAll:
    @pytest.mark.asyncio
    async def test_approves_when_any_rule_matches(self, owlbot_pr, owlbot_source):
        batch = await evaluate_all(ALL_BUILTIN_RULES, owlbot_pr, owlbot_source)
        assert batch.approved is True
        assert batch.matched_rules == ["OWLBOT_API_CHANGES"]
        assert batch.errored_rules == []

    @pytest.mark.asyncio
    async def test_facts_fetched_once_per_pr(self, owlbot_pr, owlbot_source):
        await evaluate_all(
            [OWLBOT_API_CHANGES, OWLBOT_TEMPLATE_CHANGES], owlbot_pr, owlbot_source
        )
        assert owlbot_source.calls.count("commits") == 1

    @pytest.mark.asyncio
    async def test_failed_lookup_only_fails_its_rule(self, owlbot_pr, make_source):
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])  # no metadata file
        pr = replace(owlbot_pr, title="chore: update templates [autoapprove]", body="Synced.")
        batch = await evaluate_all(
            [OWLBOT_API_CHANGES, OWLBOT_TEMPLATE_CHANGES], pr, source
        )
        assert batch.errored_rules == ["OWLBOT_API_CHANGES"]
        assert batch.outcomes[0].matched is None
        assert batch.matched_rules == ["OWLBOT_TEMPLATE_CHANGES"]
        assert batch.approved is True

    @pytest.mark.asyncio
    async def test_errored_rule_never_approves(self, owlbot_pr, make_source):
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])
        batch = await evaluate_all([OWLBOT_API_CHANGES], owlbot_pr, source)
        assert batch.approved is False
        assert batch.errored_rules == ["OWLBOT_API_CHANGES"]

    @pytest.mark.asyncio
    async def test_abort_on_error(self, owlbot_pr, make_source):
        source = make_source(commit_authors=["gcf-owl-bot[bot]"])
        with pytest.raises(NotFoundError):
            await evaluate_all(
                [OWLBOT_TEMPLATE_CHANGES, OWLBOT_API_CHANGES],
                owlbot_pr,
                source,
                abort_on_error=True,
            )

    @pytest.mark.asyncio
    async def test_custom_rule_without_author(self, owlbot_pr, make_source):
        rule = Rule(
            id="ANY_SPEECH",
            name="Speech files",
            description="",
            file_patterns=(Pattern(r"^google/cloud/speech"),),
        )
        batch = await evaluate_all([rule], replace(owlbot_pr, author="anyone"), make_source())
        assert batch.approved is True
