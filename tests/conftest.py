import pytest

from folio.markdown.renderer import build_parser


@pytest.fixture
def md():
    """A fully configured markdown-it instance."""
    return build_parser()
