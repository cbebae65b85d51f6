"""Directory exclusion rules for source enumeration.

Two tiers:

Tier 0 (HARDCODED_DIRS): never traversed, not configurable.
    - VCS internals and srcmodel's own data directory

Tier 1 (DEFAULT_PRUNABLE_DIRS): skipped by default, user can opt back in
    through ``index.included_dirs`` in config.
    - Dependencies, caches, build outputs, Go fixtures

``pkg`` is deliberately absent: in module-mode Go it is an ordinary
source directory.
"""

from __future__ import annotations

# =============================================================================
# Tier 0: HARDCODED - Never traverse, not user-configurable
# =============================================================================

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # srcmodel data
        ".srcmodel",
    )
)

# =============================================================================
# Tier 1: DEFAULT_PRUNABLE - Excluded by default, user can override
# =============================================================================

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # Go ecosystem
        # -------------------------------------------------------------------------
        "vendor",  # Vendored module copies
        "testdata",  # Ignored by the go tool; often holds invalid fixtures
        # -------------------------------------------------------------------------
        # JavaScript/Node.js ecosystem (frontends shipped beside Go services)
        # -------------------------------------------------------------------------
        "node_modules",
        "bower_components",
        # -------------------------------------------------------------------------
        # Python ecosystem
        # -------------------------------------------------------------------------
        "venv",
        ".venv",
        "__pycache__",
        ".tox",
        # -------------------------------------------------------------------------
        # Generic build/output directories
        # -------------------------------------------------------------------------
        "dist",
        "build",
        "out",
        "coverage",
        # -------------------------------------------------------------------------
        # IDE/Editor directories
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
        ".vs",
        # -------------------------------------------------------------------------
        # Misc caches
        # -------------------------------------------------------------------------
        ".cache",
        "tmp",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is hardcoded (never traversable, not overridable)."""
    return dirname in HARDCODED_DIRS


def is_default_prunable(dirname: str) -> bool:
    """Check if directory is prunable by default (but user can override)."""
    return dirname in DEFAULT_PRUNABLE_DIRS


def build_prune_set(
    excluded: list[str] | tuple[str, ...] = (),
    included: list[str] | tuple[str, ...] = (),
) -> frozenset[str]:
    """Resolve the directory names to prune for one run.

    ``included`` re-enables Tier 1 directories; Tier 0 directories stay
    pruned regardless.
    """
    reenabled = {d for d in included if not is_hardcoded_dir(d)}
    return HARDCODED_DIRS | (DEFAULT_PRUNABLE_DIRS - reenabled) | frozenset(excluded)
