from __future__ import annotations

import os
import secrets

import nox

nox.options.sessions = ["lint", "typecheck", "tests", "property"]
nox.options.reuse_existing_virtualenvs = False


@nox.session(python=["3.10", "3.11", "3.12"])
def tests(session: nox.Session) -> None:
    session.install("coverage[toml]", ".[test]")
    session.env["PYTHONHASHSEED"] = os.environ.get(
        "PYTHONHASHSEED", str(secrets.randbits(32))
    )
    session.run("coverage", "run", "--source=chromepak", "-m", "pytest", "-vv", "--strict-markers", *session.posargs)
    session.run("coverage", "report", "--fail-under=85")


@nox.session(python=["3.10", "3.11", "3.12"])
def property(session: nox.Session) -> None:
    session.install(".[test]")
    session.env["PYTHONHASHSEED"] = os.environ.get(
        "PYTHONHASHSEED", str(secrets.randbits(32))
    )
    session.run("pytest", "-vv", "-m", "property", "--strict-markers", *session.posargs)


@nox.session(python=["3.10", "3.11", "3.12"])
def lint(session: nox.Session) -> None:
    session.install("ruff", "flake8")
    session.run("ruff", "check", "chromepak", "tests")
    session.run("flake8", "--max-line-length=120", "chromepak", "tests")


@nox.session(python="3.10")
def typecheck(session: nox.Session) -> None:
    session.install("mypy", ".")
    session.run("mypy", "chromepak")


@nox.session(python="3.10")
def build(session: nox.Session) -> None:
    session.install("build", "twine")
    session.run("python", "-m", "build", "--wheel", "--sdist")
    session.run("twine", "check", "dist/*")
