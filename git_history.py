import logging
from typing import List, Optional, Sequence

import git
import git.exc

from git_graph_data import Commit, commit_from_record


class HistoryLoader:
    """Reads commit history from a repository in topological order (children first)."""

    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None

    def initialize(self) -> bool:
        try:
            self.repo = git.Repo(self.repo_path)
            return True
        except (git.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            logging.error(f"HistoryLoader: {self.repo_path} is not a git repository")
            return False

    def get_commit_history(
        self,
        revs: Optional[Sequence[str]] = None,
        limit: int = 500,
        skip: int = 0,
        all_refs: bool = False,
    ) -> List[Commit]:
        """
        Returns commits ordered for the lane allocator.

        Args:
            revs: revisions to start from (defaults to HEAD)
            limit: maximum number of commits
            skip: number of commits to skip
            all_refs: also walk every branch, tag and remote ref (git log --all)
        """
        if not self.repo and not self.initialize():
            return []

        rev_list = list(revs) if revs else ["HEAD"]
        options = {"topo_order": True, "max_count": limit, "skip": skip}
        if all_refs:
            options["all"] = True

        try:
            records = [
                {
                    "id": commit.hexsha,
                    "parent_ids": [parent.hexsha for parent in commit.parents],
                    "author": commit.author.name,
                    "email": commit.author.email or None,
                    "message": commit.message.strip().split("\n")[0],
                    "timestamp": commit.committed_date,
                }
                for commit in self.repo.iter_commits(rev_list, **options)
            ]
        except git.GitCommandError as e:
            logging.error(f"HistoryLoader: git log failed for {self.repo_path}: {e!s}")
            return []
        except ValueError as e:
            # unborn HEAD in an empty repository
            logging.info(f"HistoryLoader: no history in {self.repo_path}: {e!s}")
            return []

        logging.debug(f"HistoryLoader: loaded {len(records)} commits from {self.repo_path}")
        return [commit_from_record(record) for record in records]
