"""
Sparse checkout of a single folder from a GitHub repository.

Uses GitPython to run a shallow, blob-filtered, sparse clone into a
temporary directory and copies the requested folder to its destination.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from git import GitCommandError, Repo

from agdex.exceptions import CloneError

logger = logging.getLogger(__name__)

GITHUB_URL = "https://github.com/{repo}.git"


def clone_sparse(repo: str, sub_path: str, ref: str, dest_dir: Path) -> Path:
    """Copy one folder of a GitHub repository at a given ref to dest_dir.

    dest_dir is replaced if it exists. An empty sub_path (or ".") copies the
    whole repository.

    Args:
        repo: Repository as owner/repo.
        sub_path: Folder inside the repository.
        ref: Tag or branch name.
        dest_dir: Destination directory.

    Returns:
        dest_dir.

    Raises:
        CloneError: If cloning fails or the folder does not exist at ref.
    """
    url = GITHUB_URL.format(repo=repo)
    sub_path = sub_path.strip("/")

    with tempfile.TemporaryDirectory(prefix="agdex-clone-") as tmp:
        checkout = Path(tmp) / "repo"
        logger.debug("Cloning %s at %s into %s", url, ref, checkout)

        try:
            clone = Repo.clone_from(
                url,
                checkout,
                depth=1,
                filter="blob:none",
                sparse=True,
                branch=ref,
            )
        except GitCommandError as e:
            message = str(e)
            if "not found" in message or "did not match" in message:
                raise CloneError(
                    f"Could not find {repo} at {ref}. This version may not exist on GitHub yet.",
                    repo=repo,
                    ref=ref,
                ) from e
            raise CloneError(f"Failed to clone {repo}: {e.stderr.strip() or message}", repo=repo, ref=ref) from e

        try:
            if sub_path and sub_path != ".":
                clone.git.sparse_checkout("set", sub_path)
            else:
                clone.git.sparse_checkout("disable")
        except GitCommandError as e:
            raise CloneError(f"sparse-checkout failed for {repo}: {e}", repo=repo, ref=ref) from e
        finally:
            clone.close()

        source = checkout / sub_path if sub_path and sub_path != "." else checkout
        if not source.is_dir():
            raise CloneError(f"{sub_path} folder not found in cloned repository", repo=repo, ref=ref)

        if dest_dir.exists():
            shutil.rmtree(dest_dir)
        dest_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, dest_dir, ignore=shutil.ignore_patterns(".git"))

    return dest_dir
