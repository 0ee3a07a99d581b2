"""
Application install service — package re-exports.

    from tranquility.core.services.app_install import InstallEngine, select_method

Layers: catalog (data) → resolver → execution → orchestrator.
"""

# ── L0: Data ──
from tranquility.core.services.app_install.catalog import (  # noqa: F401
    BUILTIN_APPS,
    ApplicationCatalog,
)

# ── L2: Resolver ──
from tranquility.core.services.app_install.resolver import (  # noqa: F401
    ResolutionFailure,
    ResolvedMethod,
    filter_apps,
    is_installed,
    select_method,
)

# ── L4: Execution ──
from tranquility.core.services.app_install.execution import (  # noqa: F401
    InstallRunner,
    RunOutcome,
)

# ── L5: Orchestration ──
from tranquility.core.services.app_install.orchestrator import (  # noqa: F401
    AppOutcome,
    BatchReport,
    InstallEngine,
    InstallOptions,
)
