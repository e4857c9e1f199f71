import os
import pathlib
import shutil
from typing import Type
from setuptools import setup as _setup, find_packages

root = os.path.dirname(os.path.abspath(__file__))


def remove_dir(path: str):
    if os.path.exists(path):
        shutil.rmtree(path)


def pre_setup():

    remove_dir(os.path.join(root, "build"))

    for path in os.listdir(os.path.join(root, "src")):
        if path.endswith(".egg-info"):
            remove_dir(os.path.join(root, "src", path))


def setup(*args, **kwargs):
    pre_setup()

    name: str = kwargs["name"].replace("-", "_")
    src = pathlib.Path(root) / "src" / name
    kwargs.setdefault("version", (src / "VERSION").read_text().strip())
    kwargs.setdefault("description", (src / "DESCRIPTION").read_text().strip())
    kwargs.setdefault(
        "install_requires",
        [req for req in (src / "requirements.txt").read_text().splitlines() if req.strip()],
    )
    _setup(
        *args,
        long_description=(src / "README.md").read_text(),
        long_description_content_type="text/markdown",
        author="Jose A.",
        author_email="jose-pr@coqui.dev",
        url="https://github.com/jose-pr/pypki",
        package_dir={"": "src"},
        packages=[name, *[f"{name}.{pkg}" for pkg in find_packages(str(src))]],
        package_data={name: ["VERSION", "DESCRIPTION", "README.md", "requirements.txt"]},
        **kwargs
    )


setup: Type[_setup] = setup
