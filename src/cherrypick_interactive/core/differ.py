"""Find commits on the source branch that the target branch lacks.

Commits are matched by subject, not by hash: rebases and cherry-picks give a
commit a new hash but keep its title. Two unrelated commits that share a
subject are therefore indistinguishable, and the later one is reported as
already present.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cherrypick_interactive.vcs.git import Commit

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cherrypick_interactive.vcs.git import GitRepository

logger = logging.getLogger(__name__)


def subjects_of(repo: GitRepository, branch: str) -> set[str]:
    """Subjects of every non-merge commit reachable from ``branch``."""
    out = repo.run(["log", "--no-merges", "--pretty=%s", branch])
    return {line for line in out.splitlines() if line}


def commits_of(repo: GitRepository, branch: str, since: str) -> list[Commit]:
    """Non-merge commits on ``branch`` newer than ``since``, newest first.

    Args:
        repo: Repository to query
        branch: Branch or ref to walk
        since: Any value git accepts for ``--since`` (e.g. "2 weeks ago")
    """
    out = repo.run(["log", "--no-merges", f"--since={since}", "--pretty=%H %s", branch])
    commits = []
    for line in out.splitlines():
        if not line:
            continue
        sha, _, subject = line.partition(" ")
        commits.append(Commit(sha=sha, subject=subject))
    return commits


def find_missing(dev_commits: Iterable[Commit], main_subjects: set[str]) -> list[Commit]:
    """Commits whose subject does not appear on the target branch, in order."""
    return [commit for commit in dev_commits if commit.subject not in main_subjects]


@dataclass
class MissingCommits:
    """Missing commits, newest first, with their original positions.

    The position map lets an arbitrarily ordered selection be put back into
    the order the commits were made.
    """

    commits: list[Commit]
    index: dict[str, int] = field(init=False)

    def __post_init__(self) -> None:
        self.index = {commit.sha: position for position, commit in enumerate(self.commits)}

    def __len__(self) -> int:
        return len(self.commits)

    def __bool__(self) -> bool:
        return bool(self.commits)

    def get(self, sha: str) -> Commit | None:
        position = self.index.get(sha)
        return None if position is None else self.commits[position]

    @property
    def hashes(self) -> list[str]:
        return [commit.sha for commit in self.commits]

    def order_oldest_first(self, selection: Sequence[str]) -> list[str]:
        """Sort a selection of hashes from oldest to newest.

        Raises:
            KeyError: If a hash is not one of the missing commits
        """
        return sorted(selection, key=lambda sha: self.index[sha], reverse=True)


def fetch_branch_state(
    repo: GitRepository,
    source: str,
    target: str,
    since: str,
) -> MissingCommits:
    """Query both branches concurrently and compute the missing commits.

    Both queries are read-only, so they can run side by side.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        dev_future = pool.submit(commits_of, repo, source, since)
        main_future = pool.submit(subjects_of, repo, target)
        dev_commits = dev_future.result()
        main_subjects = main_future.result()

    missing = find_missing(dev_commits, main_subjects)
    logger.debug(
        "%d commit(s) on %s since %s, %d missing from %s",
        len(dev_commits),
        source,
        since,
        len(missing),
        target,
    )
    return MissingCommits(missing)
