"""Collects non-fatal issues found while loading HTML."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ParseIssue:
    """A single tag or construct the deserializer could not keep as-is."""
    action: str
    tag: str
    location: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "tag": self.tag,
            "location": self.location,
            "reason": self.reason,
        }


class ParseReport:
    """
    Aggregates issues raised while deserializing an interchange string.

    Deserialization degrades instead of failing: unknown tags are unwrapped
    or dropped, and unparseable input falls back to plain paragraphs. Each
    such decision is recorded here so callers can surface it.
    """

    DROPPED = "dropped"
    UNWRAPPED = "unwrapped"
    FALLBACK = "fallback"

    def __init__(self, source: str = "<string>"):
        self.source = source
        self.issues: list[ParseIssue] = []

    def add_issue(self, action: str, tag: str, location: Optional[str] = None,
                  reason: Optional[str] = None) -> None:
        self.issues.append(ParseIssue(action=action, tag=tag, location=location, reason=reason))

    def dropped(self, tag: str, location: Optional[str] = None, reason: Optional[str] = None) -> None:
        self.add_issue(self.DROPPED, tag, location, reason)

    def unwrapped(self, tag: str, location: Optional[str] = None) -> None:
        self.add_issue(self.UNWRAPPED, tag, location)

    def fell_back(self, reason: str) -> None:
        self.add_issue(self.FALLBACK, "document", reason=reason)

    @property
    def used_fallback(self) -> bool:
        return any(issue.action == self.FALLBACK for issue in self.issues)

    def has_issues(self) -> bool:
        return bool(self.issues)

    def tags(self, action: str) -> list[str]:
        """Tags that received `action`, in document order."""
        return [issue.tag for issue in self.issues if issue.action == action]

    def get_summary(self) -> dict[str, Any]:
        """Counts and details of every recorded issue."""
        return {
            "source": self.source,
            "issue_count": len(self.issues),
            "issues": [issue.to_dict() for issue in self.issues],
            "used_fallback": self.used_fallback,
        }
