"""Materialized path arithmetic for the organization hierarchy.

A root's path is ``/<id>``; a child's path is ``<parent path>/<id>``. The
full ancestor chain is therefore recoverable from the path alone:

    /A          level 0, ancestors []
    /A/B        level 1, ancestors [A]
    /A/B/C      level 2, ancestors [A, B]

Depth is unbounded. Segments are validated so the separator can never
appear inside one.
"""

from __future__ import annotations

from organizations.domain.exceptions import InvalidOrganizationPathError

PATH_SEPARATOR = "/"


def validate_segment(segment: str) -> str:
    """Return ``segment`` if it can be used as a path segment."""
    if not segment:
        raise InvalidOrganizationPathError(segment, "empty path segment")
    if PATH_SEPARATOR in segment:
        raise InvalidOrganizationPathError(
            segment, f"segment contains the separator {PATH_SEPARATOR!r}"
        )
    return segment


def root_path(organization_id: str) -> str:
    return PATH_SEPARATOR + validate_segment(organization_id)


def child_path(parent_path: str, organization_id: str) -> str:
    path_segments(parent_path)
    return parent_path + PATH_SEPARATOR + validate_segment(organization_id)


def path_segments(path: str) -> list[str]:
    """Split a path into its ids, from the root down to the organization.

    Raises:
        InvalidOrganizationPathError: If the path is not absolute or has
            empty segments.
    """
    if not path.startswith(PATH_SEPARATOR):
        raise InvalidOrganizationPathError(path, "path must start with the separator")
    segments = path[len(PATH_SEPARATOR) :].split(PATH_SEPARATOR)
    if any(not segment for segment in segments):
        raise InvalidOrganizationPathError(path, "path has an empty segment")
    return segments


def level_of(path: str) -> int:
    """Depth of the organization at ``path``; roots are level 0."""
    return len(path_segments(path)) - 1


def ancestor_ids(path: str) -> list[str]:
    """Ids of every ancestor, root first, excluding the organization itself."""
    return path_segments(path)[:-1]


def descendant_prefix(path: str) -> str:
    """Prefix shared by the paths of every strict descendant of ``path``."""
    return path + PATH_SEPARATOR


def is_descendant_path(candidate_path: str, ancestor_path: str) -> bool:
    """True if ``candidate_path`` lies strictly below ``ancestor_path``."""
    return candidate_path.startswith(descendant_prefix(ancestor_path))
