"""Helpers for the file names of an AuroraConfig."""
import posixpath
from typing import List

from aoctl.errors import NotFoundError


def _strip_extension(name: str) -> str:
    return posixpath.splitext(name)[0]


class FileNames(list):
    """The file names of one AuroraConfig, e.g. ``about.json`` or ``dev/foo.json``."""

    def without_extension(self) -> List[str]:
        return [_strip_extension(name) for name in self]

    def application_deployment_refs(self) -> List[str]:
        """Every ``env/app`` ref, skipping the ``about`` files."""
        return sorted(
            name for name in self.without_extension()
            if "/" in name and "about" not in name
        )

    def applications(self) -> List[str]:
        """Unique base application files at the root of the config."""
        return sorted({
            name for name in self.without_extension()
            if "/" not in name and "about" not in name
        })

    def environments(self) -> List[str]:
        return sorted({
            name.split("/")[0] for name in self
            if "/" in name and "about" not in name
        })

    def find(self, name: str) -> str:
        """Return the file called ``name``, with or without its extension."""
        for file_name in self:
            if name == file_name or name == _strip_extension(file_name):
                return file_name
        raise NotFoundError(f"could not find {name} in AuroraConfig")
