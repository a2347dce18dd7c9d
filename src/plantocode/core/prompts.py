from __future__ import annotations

"""
Prompt templates for the relevant-file finder.
"""

PATH_FINDER_SYSTEM_PROMPT = """You are a code path finder. You receive the directory \
tree of a software project and a task description. Identify the existing files a \
developer would need to read or modify to complete the task.

Rules:
- Answer with one project-relative file path per line and nothing else.
- Only list files that appear in the directory tree.
- Do not list directories.
- Prefer precision: omit files that are unlikely to matter."""


def generate_path_finder_system_prompt() -> str:
    return PATH_FINDER_SYSTEM_PROMPT


def generate_path_finder_user_prompt(directory_tree: str, task_description: str) -> str:
    """
    Embed the directory tree and the task into the user prompt.

    Args:
        directory_tree: Diagram from the tree generator.
        task_description: What the developer wants to achieve.

    Returns:
        str: User prompt text.
    """
    return (
        "<project_structure>\n"
        f"{directory_tree}\n"
        "</project_structure>\n\n"
        "<task>\n"
        f"{task_description.strip()}\n"
        "</task>\n\n"
        "List the relevant file paths, one per line."
    )
