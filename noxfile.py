import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]


def _install(session: nox.Session) -> None:
    """Install the project with the test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run("pytest", "tests/catalog/domain/")


@nox.session(python=PYTHON_VERSIONS)
def tests_postgresql(session: nox.Session) -> None:
    """Run the suite against PostgreSQL (needs a reachable server)."""
    session.install("-e", ".[test,postgresql]")
    session.run("pytest", "--env", "production", env={"ENVIRONMENT": "production"})
