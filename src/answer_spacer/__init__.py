"""Top-level package for Answer Spacer.

Provides subpackages:
- answer_spacer.store – per-page spacer collections
- answer_spacer.layout – reflow planning around spacers
- answer_spacer.render – page rasterization, spacer styles, composites
- answer_spacer.export – pagination slicing and PDF output
- answer_spacer.interactive – render coordination and editing handlers
- answer_spacer.settings – settings and project persistence
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
        return pkg_version("answer-spacer")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
