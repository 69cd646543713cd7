"""Invoke tasks for CabinetBox application management."""

import sys

from invoke import task
from invoke.context import Context


@task
def start(ctx: Context, host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Start the CabinetBox import API.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: 127.0.0.1)
        port: Port to bind to (default: 8000)
        reload: Enable auto-reload for development
    """
    cmd = f"uv run cabinetbox-server --host {host} --port {port}"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task(name="import")
def import_file(
    ctx: Context,
    path: str,
    publish: bool = False,
    discount: float = -1.0,
    batch_size: int = 0,
    dry_run: bool = False,
) -> None:
    """Import a WooCommerce product export into the product service.

    Args:
        ctx: Invoke context
        path: CSV or XLSX export to import
        publish: Publish every imported product
        discount: Discount percentage for every product (default: from config)
        batch_size: Concurrent create calls per batch (default: from config)
        dry_run: Parse and map only
    """
    cmd = f"uv run cabinetbox-import {path}"
    if publish:
        cmd += " --publish"
    if discount >= 0:
        cmd += f" --discount {discount}"
    if batch_size > 0:
        cmd += f" --batch-size {batch_size}"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=cabinetbox --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files."""
    # Clean Python cache
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    # Clean build artifacts
    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
