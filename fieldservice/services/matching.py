"""Best-technician selection for a set of required skills."""

from __future__ import annotations

from typing import Iterable, Protocol


class _Candidate(Protocol):
    skills: list
    experience_years: int | None


def matching_skill_count(technician: _Candidate, required: frozenset[str]) -> int:
    return len(set(technician.skills or []) & required)


def ranking_key(technician: _Candidate, required: frozenset[str]) -> tuple[int, int, int]:
    """(experience, matching skills, total skills); larger is better."""
    skills = set(technician.skills or [])
    return (technician.experience_years or 0, len(skills & required), len(skills))


def find_best_technician(candidates: Iterable[_Candidate], required_skills: Iterable[str]):
    """Pick the most experienced technician who has every required skill.

    ``candidates`` must already be restricted to available technicians.
    Skill matching is exact and case-sensitive. Experience wins first
    (missing counts as 0), then the number of matching skills, then the
    breadth of the technician's whole skill set. When every key ties the
    earliest candidate in iteration order is kept, so the result depends on
    the order of the snapshot passed in.

    Returns None when nobody qualifies.
    """
    required = frozenset(required_skills)
    best = None
    best_key: tuple[int, int, int] | None = None
    for tech in candidates:
        if not required.issubset(set(tech.skills or [])):
            continue
        key = ranking_key(tech, required)
        if best_key is None or key > best_key:
            best, best_key = tech, key
    return best
