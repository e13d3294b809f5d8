"""Scored search over members and responsibility paths.

Scores are additive weights per matched field; results are sorted by score
(highest first) and ties keep the input order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal

from src.organogram.models import OrgNode, ResponsibilityPath

# Finder: role match is required when a role is given and worth a base score.
FINDER_ROLE_BONUS = 30
FINDER_MAX_RESULTS = 6
FINDER_MIN_SCORE = 30


@dataclass(frozen=True, slots=True)
class MemberHit:
    member: OrgNode
    score: int
    matched_fields: tuple[str, ...] = ()
    kind: Literal["member"] = "member"


@dataclass(frozen=True, slots=True)
class PathHit:
    path: ResponsibilityPath
    score: int
    matched_fields: tuple[str, ...] = ()
    kind: Literal["responsibility"] = "responsibility"


@dataclass(frozen=True, slots=True)
class SearchResults:
    members: tuple[MemberHit, ...] = ()
    paths: tuple[PathHit, ...] = ()
    combined: tuple[MemberHit | PathHit, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.combined)


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()  # type: ignore[union-attr]


def search_members(members: Iterable[OrgNode], query: str, max_results: int = 5) -> list[MemberHit]:
    needle = query.strip().lower()
    if not needle:
        return []

    weights = (
        ("name", 50),
        ("title", 30),
        ("position_short", 20),
        ("email", 15),
        ("department", 10),
    )
    hits: list[MemberHit] = []
    for member in members:
        score = 0
        matched: list[str] = []
        for attr, weight in weights:
            if _contains(getattr(member, attr), needle):
                score += weight
                matched.append(attr)
        if score > 0:
            hits.append(MemberHit(member=member, score=score, matched_fields=tuple(matched)))
    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:max_results]


def search_paths(
    paths: Iterable[ResponsibilityPath], query: str, max_results: int = 5
) -> list[PathHit]:
    needle = query.strip().lower()
    if not needle:
        return []
    words = needle.split()

    hits: list[PathHit] = []
    for path in paths:
        score = 0
        matched: list[str] = []
        question = path.question.lower()
        summary = path.summary.lower()
        if needle in question:
            score += 50
            matched.append("question")
        if needle in summary:
            score += 30
            matched.append("summary")
        keyword_hits = [kw for kw in path.keywords if needle in kw.lower()]
        if keyword_hits:
            score += 20 * len(keyword_hits)
            matched.append("keywords")
        for word in words:
            if word in question:
                score += 5
            if word in summary:
                score += 3
        if score > 0:
            hits.append(PathHit(path=path, score=score, matched_fields=tuple(matched)))
    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:max_results]


def unified_search(
    members: Iterable[OrgNode],
    paths: Iterable[ResponsibilityPath],
    query: str,
    max_results: int = 5,
) -> SearchResults:
    """Search both sources and interleave the hits (member first)."""
    member_hits = search_members(members, query, max_results)
    path_hits = search_paths(paths, query, max_results)
    combined: list[MemberHit | PathHit] = []
    for i in range(max(len(member_hits), len(path_hits))):
        if i < len(member_hits):
            combined.append(member_hits[i])
        if i < len(path_hits):
            combined.append(path_hits[i])
    return SearchResults(
        members=tuple(member_hits), paths=tuple(path_hits), combined=tuple(combined)
    )


def find_paths(
    paths: Iterable[ResponsibilityPath],
    *,
    role: str | None = None,
    question: str = "",
    max_results: int = FINDER_MAX_RESULTS,
) -> list[PathHit]:
    """The finder: "I am a <role> and I <question>".

    With a role but no question every path for that role is returned. With a
    question, a path must score above ``FINDER_MIN_SCORE``, so with a role it
    needs at least one text match on top of the role bonus.
    """
    query = question.strip().lower()
    if not query and not role:
        return []
    words = [w for w in query.split() if len(w) > 2]

    hits: list[PathHit] = []
    for path in paths:
        if role and role not in path.roles:
            continue
        score = FINDER_ROLE_BONUS if role else 0
        matched: list[str] = ["role"] if role else []
        if query:
            path_question = path.question.lower()
            if path_question and (query in path_question or path_question in query):
                score += 50
                matched.append("question")
            keyword_hits = [
                kw for kw in path.keywords if kw.lower() in query or query in kw.lower()
            ]
            if keyword_hits:
                score += 10 * len(keyword_hits)
                matched.append("keywords")
            for word in words:
                if word in path_question:
                    score += 5
                score += 3 * sum(1 for kw in path.keywords if word in kw.lower())

        if (not query and role) or (query and score > FINDER_MIN_SCORE):
            hits.append(PathHit(path=path, score=score, matched_fields=tuple(matched)))
    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:max_results]


__all__ = [
    "FINDER_MAX_RESULTS",
    "FINDER_MIN_SCORE",
    "MemberHit",
    "PathHit",
    "SearchResults",
    "find_paths",
    "search_members",
    "search_paths",
    "unified_search",
]
