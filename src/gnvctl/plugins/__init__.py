"""Extension layer: lifecycle hooks via pluggy.

Discovery: entry points in the ``gnvctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from gnvctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
