"""
Domain models — Pydantic types for tranquility.

All models are re-exported here for convenient access:

    from tranquility.core.models import Application, InstallMethod, VpsEntry
"""

from tranquility.core.models.application import (
    Application,
    ApplicationList,
    ApplicationVersion,
    InstallMethod,
    InstallSteps,
    to_kebab_case,
)
from tranquility.core.models.category import Category
from tranquility.core.models.package_manager import PackageManager
from tranquility.core.models.result import CommandResult
from tranquility.core.models.settings import Settings
from tranquility.core.models.system import OsSupport, SystemInfo, SystemSupport
from tranquility.core.models.vps import (
    VpsConfig,
    VpsConfigXml,
    VpsEntry,
    generate_id,
    unique_id,
)

__all__ = [
    # application.py
    "Application",
    "ApplicationList",
    "ApplicationVersion",
    # category.py
    "Category",
    # result.py
    "CommandResult",
    "InstallMethod",
    "InstallSteps",
    # system.py
    "OsSupport",
    # package_manager.py
    "PackageManager",
    # settings.py
    "Settings",
    "SystemInfo",
    "SystemSupport",
    # vps.py
    "VpsConfig",
    "VpsConfigXml",
    "VpsEntry",
    "generate_id",
    "to_kebab_case",
    "unique_id",
]
