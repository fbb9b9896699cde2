"""Site planning operations built on the models and spatial computations.

- map_editing: place, add, remove and update map elements on a site
- project: multi-site project list operations
- duplication: copy a site with fresh identity
- validation: completeness report and site statistics
- sora: derive contingency volume and ground risk buffer for a site
- flight_paths: waypoint editing, path analysis and pattern generation
"""

from rpas_sites.planning.duplication import duplicate_site
from rpas_sites.planning.validation import get_site_stats, validate_site_completeness

__all__ = ["duplicate_site", "get_site_stats", "validate_site_completeness"]
