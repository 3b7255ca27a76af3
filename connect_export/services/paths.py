"""
Deterministic mapping of exported resources to output file paths.
"""

import logging
from pathlib import Path
from typing import Dict, Set

from ..models.resources import ResourceKind


logger = logging.getLogger(__name__)

INSTANCE_FILE = "instance.json"
INSTANCE_VARIABLES_FILE = "instance.var"


def safe_file_component(name: str) -> str:
    """Replace path separators so a resource name stays inside the output directory."""
    return name.replace('/', '_').replace('\\', '_')


class PathMapper:
    """Maps resource kinds and names to files inside one output directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._issued: Dict[str, Set[str]] = {}

    def manifest_path(self, kind: ResourceKind) -> Path:
        return self.directory / kind.manifest_name

    def instance_path(self) -> Path:
        return self.directory / INSTANCE_FILE

    def instance_variables_path(self) -> Path:
        return self.directory / INSTANCE_VARIABLES_FILE

    def detail_path(self, file_prefix: str, name: str) -> Path:
        """
        Path of the detail file for one resource.

        Two resources of the same kind sharing a name map to the same file;
        the collision is logged and the later write wins.

        Args:
            file_prefix: Kind prefix (hour, queue, routing, routingQs, module, flow)
            name: Resource name

        Returns:
            Path: <directory>/<file_prefix>_<name>.json
        """
        file_name = f"{file_prefix}_{safe_file_component(name)}.json"

        issued = self._issued.setdefault(file_prefix, set())
        if file_name in issued:
            logger.warning(
                f"Duplicate {file_prefix} name '{name}': {file_name} will be overwritten",
                extra={'context': {'file_prefix': file_prefix, 'name': name, 'file': file_name}}
            )
        issued.add(file_name)

        return self.directory / file_name
