from __future__ import annotations

from hyperhive.github_models import (
    GitHubCommit,
    GitHubCommitAuthor,
    GitHubCommitDetails,
    GitHubCommitFile,
    GitHubCommitStats,
    GitHubPullRequest,
)
from hyperhive.pattern_analyzer import (
    analyze_concepts,
    analyze_developer,
    analyze_domain_areas,
    analyze_languages,
    analyze_technologies,
    count_occurrences,
    detect_language,
    extract_file_paths,
)


def _commit(message: str, *, files=None, additions: int = 0, deletions: int = 0, author: str = "") -> GitHubCommit:
    return GitHubCommit(
        sha=message[:7],
        commit=GitHubCommitDetails(message=message, author=GitHubCommitAuthor(name=author)),
        stats=GitHubCommitStats(additions=additions, deletions=deletions, total=additions + deletions),
        files=files,
    )


def test_detect_language_by_extension_and_marker_name() -> None:
    assert detect_language("src/App.tsx") == "TypeScript"
    assert detect_language("Controllers\\UserController.CS") == "C#"
    assert detect_language("deploy/Dockerfile") == "Docker"
    assert detect_language("docs/README.MD") == "Markdown"
    assert detect_language("Makefile") == "Unknown"


def test_count_occurrences_is_case_insensitive_substring() -> None:
    assert count_occurrences("Test testing TEST", "test") == 3
    assert count_occurrences("a.b", ".") == 1
    assert count_occurrences("anything", "") == 0


def test_extract_file_paths_from_message() -> None:
    assert extract_file_paths("Fix bug in utils.py") == ["utils.py"]


def test_languages_count_changed_files() -> None:
    commits = [
        _commit(
            "Add services",
            files=[
                GitHubCommitFile(filename="app/a.py", additions=10),
                GitHubCommitFile(filename="app/b.py", additions=5),
                GitHubCommitFile(filename="web/c.js", additions=3),
            ],
        )
    ]
    languages = analyze_languages(commits)
    assert [usage.language for usage in languages] == ["Python", "JavaScript"]
    assert languages[0].file_count == 2
    assert languages[0].lines_of_code == 15
    assert languages[0].percentage == 66.67
    assert languages[1].percentage == 33.33


def test_languages_fall_back_to_paths_in_message() -> None:
    languages = analyze_languages([_commit("Fix bug in utils.py", additions=7)])
    assert len(languages) == 1
    assert languages[0].language == "Python"
    assert languages[0].lines_of_code == 7


def test_technologies_weight_commit_messages_twice() -> None:
    commits = [_commit("Add Dockerfile", files=[GitHubCommitFile(filename="Dockerfile")])]
    technologies = analyze_technologies(commits, [])
    assert len(technologies) == 1
    docker = technologies[0]
    assert docker.technology == "Docker"
    # twice from the message, once from the changed file name
    assert docker.usage_count == 3
    assert docker.percentage == 100.0
    assert docker.files == ["Dockerfile"]


def test_domain_areas_use_pull_request_titles_as_examples() -> None:
    pull_requests = [GitHubPullRequest(id=1, number=1, title="Add login page")]
    areas = analyze_domain_areas([], pull_requests)
    assert len(areas) == 1
    assert areas[0].area == "Authentication"
    assert areas[0].contribution_count == 1
    assert areas[0].examples == ["Add login page"]


def test_concepts_come_from_commit_messages() -> None:
    concepts = analyze_concepts([_commit("Refactor async handlers to await results\n\nDetails here")])
    assert concepts[0].concept == "Async/Await"
    assert concepts[0].occurrence_count == 2
    assert concepts[0].examples == ["Refactor async handlers to await results"]


def test_analyze_developer_totals_and_display_name() -> None:
    commits = [
        _commit("Initial import", additions=12, deletions=2, author="Octo Cat"),
        _commit("Second change", additions=3, deletions=1, author="Someone Else"),
    ]
    analysis = analyze_developer("octocat", commits, [])
    assert analysis.developer_name == "Octo Cat"
    assert analysis.total_commits == 2
    assert analysis.total_pull_requests == 0
    assert analysis.total_lines_added == 15
    assert analysis.total_lines_deleted == 3


def test_analyze_developer_without_activity() -> None:
    analysis = analyze_developer("octocat", [], [])
    assert analysis.developer_name == "octocat"
    assert analysis.languages == []
    assert analysis.technologies == []


def test_equal_counts_keep_dictionary_order() -> None:
    technologies = analyze_technologies([_commit("Kafka Redis")], [])
    assert [usage.technology for usage in technologies] == ["Redis", "Kafka"]
    assert [usage.usage_count for usage in technologies] == [2, 2]


def test_percentages_share_the_total_of_emitted_counts() -> None:
    technologies = analyze_technologies([_commit("Kafka Redis Redis")], [])
    assert [(usage.technology, usage.usage_count, usage.percentage) for usage in technologies] == [
        ("Redis", 4, 66.67),
        ("Kafka", 2, 33.33),
    ]


def test_technology_files_are_capped_at_ten() -> None:
    files = [GitHubCommitFile(filename=f"RedisCache{index}.cs", additions=1) for index in range(12)]
    technologies = analyze_technologies([_commit("Tune cache", files=files)], [])
    redis = next(usage for usage in technologies if usage.technology == "Redis")
    assert redis.files == [f"RedisCache{index}.cs" for index in range(10)]
    assert redis.usage_count == 12


def test_domain_examples_are_capped_at_five() -> None:
    commits = [_commit(f"Fix login bug {index}\n\nDetails") for index in range(7)]
    areas = analyze_domain_areas(commits, [])
    auth = next(area for area in areas if area.area == "Authentication")
    assert auth.examples == [f"Fix login bug {index}" for index in range(5)]


def test_concept_examples_are_capped_at_five() -> None:
    commits = [_commit(f"Add cache layer {index}") for index in range(7)]
    caching = next(concept for concept in analyze_concepts(commits) if concept.concept == "Caching")
    assert caching.examples == [f"Add cache layer {index}" for index in range(5)]
    assert caching.occurrence_count == 7
