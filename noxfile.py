"""Nox sessions."""

from __future__ import annotations

from pathlib import Path

import nox
from nox import Session, session

package = "pipealign"
python_versions = ["3.12", "3.11", "3.10", "3.9"]
nox.options.sessions = "format_check", "lint", "tests", "mypy"
locations = [
    "pipealign",
    "tests",
]


@session(python=python_versions[0])
def format(session: Session) -> None:
    """Run black and isort code formatters."""
    args = session.posargs or locations
    session.install("black", "isort", "ssort")
    session.run("ssort", *args)
    session.run("isort", "--profile", "black", *args)
    session.run("black", *args)


@session(python=python_versions[0])
def format_check(session: Session) -> None:
    """Check the code is formatted with black and isort."""
    args = session.posargs or locations
    session.install("black", "isort", "ssort")
    session.run("ssort", "--check", *args)
    session.run("isort", "--profile", "black", "--check", *args)
    session.run("black", "--check", *args)


@session(python=python_versions)
def mypy(session: Session) -> None:
    """Type-check using mypy."""
    session.install("mypy")
    session.install("-e", ".")
    session.run("mypy", *(session.posargs or ["-p", package]))


@session(python=python_versions)
def lint(session: Session) -> None:
    """Lint using flake8."""
    args = session.posargs or locations
    session.install(
        "flake8",
        "flake8-annotations",
        "flake8-bugbear",
        "flake8-docstrings",
        "flake8-isort",
    )
    session.run("flake8", *args)


@session(python=python_versions)
def tests(session: Session) -> None:
    """Run the test suite."""
    session.install(".[test]")

    try:
        session.run("coverage", "run", "--parallel", "-m", "pytest", *session.posargs)
    finally:
        if session.interactive:
            session.notify("coverage", posargs=[])


@session(python=python_versions)
def coverage(session: Session) -> None:
    """Produce the coverage report."""
    args = session.posargs or ["report"]

    session.install("coverage[toml]")

    if not session.posargs and any(Path().glob(".coverage.*")):
        session.run("coverage", "combine")

    session.run("coverage", *args)
