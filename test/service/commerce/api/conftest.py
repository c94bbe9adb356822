import pytest

from test.test_main import app


@pytest.fixture
def override():
    """Replace a use case dependency for one test: override(UseCase.depends, fake)."""

    def _override(dependency, fake) -> None:
        app.dependency_overrides[dependency] = lambda: fake

    yield _override
    app.dependency_overrides.clear()
