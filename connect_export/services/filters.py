"""
Name-prefix filtering of resource summaries.
"""

import re
from dataclasses import dataclass
from typing import List, Dict, Any, Optional

from ..models.resources import ResourceKind


DEFAULT_ADMIT_PREFIX = "Default "


@dataclass(frozen=True)
class NameFilter:
    """
    Inclusion and exclusion predicates applied to summary names.

    Both prefixes are regular expression fragments anchored at the start of
    the name. Names starting with ``always_admit_prefix`` pass the inclusion
    predicate regardless of ``include_prefix``.
    """

    include_prefix: Optional[str] = None
    exclude_prefix: Optional[str] = None
    always_admit_prefix: str = DEFAULT_ADMIT_PREFIX

    @property
    def is_active(self) -> bool:
        return bool(self.include_prefix or self.exclude_prefix)

    def for_kind(self, kind: ResourceKind) -> 'NameFilter':
        """Narrow this filter to the predicates that apply to a resource kind."""
        return NameFilter(
            include_prefix=self.include_prefix if kind.uses_include_filter else None,
            exclude_prefix=self.exclude_prefix if kind.uses_exclude_filter else None,
            always_admit_prefix=self.always_admit_prefix
        )

    def excludes(self, name: str) -> bool:
        if not self.exclude_prefix:
            return False
        return re.match(f"^({self.exclude_prefix})", name) is not None

    def includes(self, name: str) -> bool:
        if not self.include_prefix:
            return True
        pattern = f"^({self.include_prefix}|{re.escape(self.always_admit_prefix)}).*"
        return re.match(pattern, name) is not None

    def admits(self, name: str) -> bool:
        return self.includes(name) and not self.excludes(name)

    def describe(self) -> List[str]:
        """Textual list of the active predicates, for reporting only."""
        applied = []
        if self.include_prefix:
            applied.append(f"include '{self.include_prefix}' (or '{self.always_admit_prefix}')")
        if self.exclude_prefix:
            applied.append(f"ignore '{self.exclude_prefix}'")
        return applied


def sort_by_name(summaries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort summaries by name, case-sensitive and ordinal."""
    return sorted(summaries, key=lambda summary: summary.get('Name', ''))


def drop_excluded_types(summaries: List[Dict[str, Any]], kind: ResourceKind) -> List[Dict[str, Any]]:
    """
    Remove summaries whose type marker is never exported for the kind.

    Args:
        summaries: Summaries returned by the listing call
        kind: Resource kind the summaries belong to

    Returns:
        List[Dict[str, Any]]: Summaries without the excluded types
    """
    if not kind.type_field or not kind.excluded_types:
        return list(summaries)
    return [s for s in summaries if s.get(kind.type_field) not in kind.excluded_types]


def filter_summaries(summaries: List[Dict[str, Any]], name_filter: NameFilter) -> List[Dict[str, Any]]:
    """
    Apply the name filter and sort the survivors by name.

    Args:
        summaries: Summaries in any order
        name_filter: Predicates to apply, already narrowed to the kind

    Returns:
        List[Dict[str, Any]]: Admitted summaries sorted by name
    """
    admitted = [s for s in summaries if name_filter.admits(s.get('Name', ''))]
    return sort_by_name(admitted)
