"""circular-scan: find circular dependencies among JS/TS/Vue source files."""

from circular_scan.pipeline import circular_deps_detect, run_detect

__version__ = "0.1.0"

__all__ = ["circular_deps_detect", "run_detect", "__version__"]
