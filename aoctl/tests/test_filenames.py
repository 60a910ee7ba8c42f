import pytest

from aoctl.errors import NotFoundError
from aoctl.modules.filenames import FileNames

FILES = FileNames([
    "about.json",
    "foo.json",
    "bar.yaml",
    "dev/about.json",
    "dev/foo.json",
    "dev/bar.json",
    "test/foo.json",
])


def test_application_deployment_refs():
    assert FILES.application_deployment_refs() == ["dev/bar", "dev/foo", "test/foo"]


def test_applications():
    assert FILES.applications() == ["bar", "foo"]


def test_environments():
    assert FILES.environments() == ["dev", "test"]


def test_find_with_and_without_extension():
    assert FILES.find("dev/foo") == "dev/foo.json"
    assert FILES.find("bar.yaml") == "bar.yaml"


def test_find_missing_file():
    with pytest.raises(NotFoundError):
        FILES.find("prod/foo")
