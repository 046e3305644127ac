"""Pytest configuration for the pslocdata test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- HYPOTHESIS_PROFILE env var -> explicit override
- CI=true environment variable -> "ci" profile
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Property tests that write modules under tmp_path reuse the function-scoped
# fixture across examples; every example writes its own subdirectory.
_SUPPRESSED = [HealthCheck.function_scoped_fixture]

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    suppress_health_check=_SUPPRESSED,
)

# CI profile: fast feedback (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
    suppress_health_check=_SUPPRESSED,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
    suppress_health_check=_SUPPRESSED,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    import os

    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# MODULE FIXTURES
# =============================================================================


type ModuleFactory = Callable[..., Path]


@pytest.fixture
def make_module(tmp_path: Path) -> ModuleFactory:
    """Write a module and its locale-data files under tmp_path.

    Usage:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName S.psd1",
            data={"en-US/S.psd1": "@{ Hello = 'Hello' }"},
        )
    """

    def factory(
        source: str,
        *,
        data: dict[str, str] | None = None,
        name: str = "Module.psm1",
        directory: str = "Module",
    ) -> Path:
        module_dir = tmp_path / directory
        module_dir.mkdir(parents=True, exist_ok=True)
        module_path = module_dir / name
        module_path.write_text(source, encoding="utf-8")
        for relative, text in (data or {}).items():
            data_path = module_dir / relative
            data_path.parent.mkdir(parents=True, exist_ok=True)
            data_path.write_text(text, encoding="utf-8")
        return module_path

    return factory
