import pytest

from src.bom_merge import PipelineConfig


def pytest_addoption(parser):
    """Registers custom command-line flags for pytest."""
    parser.addoption(
        "--snapshot-update",
        action="store_true",
        default=False,
        help="Rewrite the stored BOM snapshots instead of comparing against them.",
    )


@pytest.fixture
def snapshot_update(request):
    """True when the run was started with --snapshot-update."""
    return request.config.getoption("--snapshot-update")


@pytest.fixture
def diagnostics():
    """Collects every diagnostic emitted during a test."""
    return []


@pytest.fixture
def config(diagnostics):
    """A pipeline config that records diagnostics into the `diagnostics` fixture."""
    return PipelineConfig(debug=True, on_diagnostic=diagnostics.append)
