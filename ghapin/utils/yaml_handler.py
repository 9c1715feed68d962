"""
yaml_handler.py - Utilities for YAML processing

This module finds workflow and action files and extracts the ``uses:``
values of their steps. The parsed YAML is only used to locate references;
files are never written back from it.
"""

from pathlib import Path
from typing import Any, Dict, List, TextIO, cast

import yaml


class WorkflowLoader(yaml.SafeLoader):
    """Safe YAML loader for GitHub Actions files"""

    def __init__(self, stream: TextIO | str) -> None:
        super().__init__(stream)


# PyYAML follows YAML 1.1, which resolves plain ``on``/``off``/``yes``/``no``
# to booleans. Workflows use ``on`` as a top-level key, so the implicit bool
# resolver is dropped and those words stay strings.
for first_char, resolvers in list(WorkflowLoader.yaml_implicit_resolvers.items()):
    WorkflowLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"
    ]


def load_workflow(content: str) -> Dict[str, Any]:
    """
    Parse workflow or action YAML

    Args:
        content: YAML content as string

    Returns:
        Parsed document, or an empty dict if the document is not a mapping

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    data = yaml.load(content, Loader=WorkflowLoader)
    if not isinstance(data, dict):
        return {}
    return cast(Dict[str, Any], data)


def _step_uses(steps: Any) -> List[str]:
    if not isinstance(steps, list):
        return []

    return [
        step["uses"]
        for step in steps
        if isinstance(step, dict) and isinstance(step.get("uses"), str)
    ]


def extract_uses(content: str) -> List[str]:
    """
    Extract the ``uses:`` values of all steps in a document

    Steps are looked up under ``jobs.<job>.steps`` (workflows) and
    ``runs.steps`` (composite actions).

    Args:
        content: YAML content as string

    Returns:
        ``uses:`` values in document order

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    data = load_workflow(content)
    uses_values: List[str] = []

    jobs = data.get("jobs")
    if isinstance(jobs, dict):
        for job in jobs.values():
            if isinstance(job, dict):
                uses_values.extend(_step_uses(job.get("steps")))

    runs = data.get("runs")
    if isinstance(runs, dict):
        uses_values.extend(_step_uses(runs.get("steps")))

    return uses_values


def find_yaml_files(directory: str, recursive: bool = True) -> List[Path]:
    """
    Find all YAML files in a directory

    Args:
        directory: Directory to search
        recursive: Whether to search recursively

    Returns:
        Sorted list of paths to .yml and .yaml files
    """
    path = Path(directory)
    if not path.is_dir():
        return []

    pattern = "**/*" if recursive else "*"
    return sorted(
        p for p in path.glob(pattern) if p.is_file() and p.suffix.lower() in (".yml", ".yaml")
    )

