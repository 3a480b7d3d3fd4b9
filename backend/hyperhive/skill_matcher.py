"""Fuzzy comparison between a learner's claimed skills and GitHub-derived skills."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .github_models import DeveloperStrongAreas
from .validation_models import SkillsComparison

MAX_EDIT_DISTANCE = 2

# Concepts that are reported as skills alongside languages and technologies.
SKILL_CONCEPTS = frozenset({"Async/Await", "LINQ", "REST API", "GraphQL", "gRPC"})


def edit_distance(first: str, second: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute."""
    if not first:
        return len(second)
    if not second:
        return len(first)

    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i] + [0] * len(second)
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[-1]


def _normalize(skills: Iterable[str]) -> List[str]:
    return [skill.strip().lower() for skill in skills]


def _is_fuzzy_match(claimed: str, derived: str) -> bool:
    return derived in claimed or claimed in derived or edit_distance(claimed, derived) <= MAX_EDIT_DISTANCE


def compare_skills(claimed: Sequence[str], github: Sequence[str]) -> SkillsComparison:
    """Partition claimed skills into matched and unverified against derived skills.

    A claimed skill matches when a derived skill contains it, is contained by it,
    or sits within two edits of it. Several claimed skills may match the same
    derived skill. Derived skills with no substring relation to any claimed skill
    are reported as additional.
    """
    claimed = list(claimed)
    github = list(github)
    normalized_claimed = _normalize(claimed)
    normalized_github = _normalize(github)

    # duplicates are reported by the first spelling that normalizes to them
    first_spelling: Dict[str, str] = {}
    for original, skill in zip(claimed, normalized_claimed):
        first_spelling.setdefault(skill, original)

    matched_keys = {
        skill for skill in normalized_claimed if any(_is_fuzzy_match(skill, derived) for derived in normalized_github)
    }
    matched = [first_spelling[skill] for skill in normalized_claimed if skill in matched_keys]
    unverified = [original for original, skill in zip(claimed, normalized_claimed) if skill not in matched_keys]

    additional = [
        github[index]
        for index, derived in enumerate(normalized_github)
        if not any(derived in skill or skill in derived for skill in normalized_claimed)
    ]

    percentage = round(len(matched) / len(claimed) * 100, 2) if claimed else 0.0

    return SkillsComparison(
        claimed_skills=claimed,
        github_skills=github,
        matched_skills=matched,
        unverified_skills=unverified,
        additional_github_skills=additional,
        match_percentage=percentage,
    )


def extract_github_skills(analysis: DeveloperStrongAreas) -> List[str]:
    """Languages, then technologies, then skill-like concepts, without duplicates."""
    skills: List[str] = []
    candidates = (
        [usage.language for usage in analysis.languages]
        + [usage.technology for usage in analysis.technologies]
        + [usage.concept for usage in analysis.concepts if usage.concept in SKILL_CONCEPTS]
    )
    for skill in candidates:
        if skill not in skills:
            skills.append(skill)
    return skills


__all__ = ["MAX_EDIT_DISTANCE", "SKILL_CONCEPTS", "compare_skills", "edit_distance", "extract_github_skills"]
