from __future__ import annotations

"""
Relevant File Finder.

Asks Gemini which project files matter for a task. The model sees the
directory tree and the task description; its answer is parsed into
paths and checked against the real file listing, so hallucinated or
binary paths never reach the caller.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Set

from plantocode.core.analysis.tree_builder import build_tree
from plantocode.core.analysis.tree_renderer import format_tree
from plantocode.core.processing.tokenizer import estimate_tokens
from plantocode.core.prompts import (
    generate_path_finder_system_prompt,
    generate_path_finder_user_prompt,
)
from plantocode.core.services.file_lister import (
    DirectoryTreeOptions,
    FileListingError,
    get_all_non_ignored_files,
)
from plantocode.core.services.filters import is_binary_path
from plantocode.domain.gemini_models import GeminiRequestOptions
from plantocode.infra.network.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

MAX_INPUT_TOKENS = 1_000_000
TOKEN_BUFFER = 20_000

_LEADING_BULLET_RX = re.compile(r"^(?:\d+[.)]|[-*+])\s+")
_FILE_TAG_RX = re.compile(r"<file[^>]*\bpath=[\"']([^\"']+)[\"']", re.IGNORECASE)
_PATH_TOKEN_RX = re.compile(r"[\w.\-/\\]+\.[A-Za-z0-9]+")

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

class PathFinderError(Exception):
    """Raised when the workflow cannot produce a result."""


@dataclass(frozen=True)
class PathFinderResult:
    """
    Outcome of a path finder run.

    Attributes:
        paths: Validated project-relative paths, in model order.
        directory_tree: Tree sent to the model.
        estimated_tokens: Estimated prompt size (system + user).
        raw_response: Unparsed model output.
    """
    paths: List[str] = field(default_factory=list)
    directory_tree: str = ""
    estimated_tokens: int = 0
    raw_response: str = ""

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def find_relevant_files(
        project_directory: str,
        task_description: str,
        client: GeminiClient,
        options: Optional[GeminiRequestOptions] = None,
        excluded_files: Sequence[str] = (),
        tree_options: Optional[DirectoryTreeOptions] = None,
) -> PathFinderResult:
    """
    Run the path finder workflow for one task.

    Args:
        project_directory: Project root.
        task_description: Task the files should serve.
        client: Gemini client used for the request.
        options: Generation settings; the system prompt is always replaced.
        excluded_files: Paths to drop from the result.
        tree_options: Enumeration options for listing and the tree.

    Returns:
        PathFinderResult: Validated paths plus the prompt context.

    Raises:
        PathFinderError: On an empty task, an empty project, a failed
                         listing or an oversized prompt.
        GeminiError: If the API call fails.
    """
    if not task_description or not task_description.strip():
        raise PathFinderError("Task description cannot be empty.")

    try:
        listing = get_all_non_ignored_files(project_directory, tree_options)
    except FileListingError as e:
        raise PathFinderError(f"Failed to get project files: {e}") from e

    if not listing.files:
        raise PathFinderError("No files found in project directory")
    logger.info(f"PathFinder: found {len(listing.files)} files in project")

    directory_tree = format_tree(build_tree(listing.files)).strip()
    system_prompt = generate_path_finder_system_prompt()
    user_prompt = generate_path_finder_user_prompt(directory_tree, task_description)

    estimated = estimate_tokens(user_prompt) + estimate_tokens(system_prompt)
    if estimated > MAX_INPUT_TOKENS - TOKEN_BUFFER:
        raise PathFinderError(
            f"The project is too large to analyze at once ({estimated} estimated tokens). "
            "Please try a more specific task description or focus on a subdirectory."
        )

    request_options = replace(options or GeminiRequestOptions(), system_prompt=system_prompt)
    response = client.send_request(user_prompt, request_options)

    candidates = extract_paths(response.text)
    paths = validate_paths(candidates, listing.files, excluded_files)
    logger.info(f"PathFinder: {len(paths)} relevant files out of {len(candidates)} suggested")

    return PathFinderResult(
        paths=paths,
        directory_tree=directory_tree,
        estimated_tokens=estimated,
        raw_response=response.text,
    )


def extract_paths(response_text: str) -> List[str]:
    """
    Parse candidate paths from a model answer.

    `<file path="...">` tags win when present. Otherwise one path per
    line (numbering and bullets stripped, node_modules entries dropped),
    and as a last resort any path-like token in the text.
    """
    if "<file" in response_text:
        tagged = _FILE_TAG_RX.findall(response_text)
        if tagged:
            return tagged

    paths: List[str] = []
    for line in response_text.splitlines():
        line = line.strip()
        if not line or "node_modules/" in line:
            continue
        cleaned = _LEADING_BULLET_RX.sub("", line).strip().strip("`")
        if cleaned:
            paths.append(cleaned)

    if not paths:
        paths = _PATH_TOKEN_RX.findall(response_text)

    return paths


def validate_paths(
        candidates: Iterable[str],
        known_files: Iterable[str],
        excluded_files: Sequence[str] = (),
) -> List[str]:
    """
    Keep candidates that exist in the listing, deduplicated in order.

    Backslashes are normalized and a leading "./" is dropped before the
    lookup. Binary and explicitly excluded paths are removed.
    """
    known: Set[str] = set(known_files)
    excluded: Set[str] = {normalize_candidate(p) for p in excluded_files}
    seen: Set[str] = set()
    result: List[str] = []

    for candidate in candidates:
        path = normalize_candidate(candidate)
        if not path or path in seen:
            continue
        if path not in known:
            logger.debug(f"PathFinder: discarding unknown path '{candidate}'")
            continue
        if is_binary_path(path) or path in excluded:
            continue
        seen.add(path)
        result.append(path)

    return result


def normalize_candidate(path: str) -> str:
    normalized = path.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized
