"""
Product record layout.

The core works on plain product dicts; these are the names of the
nested groups the reconciler merges key-by-key.
"""

QUALITY_SPECS = "quality_specs"
DIMENSIONS = "dimensions_l_w_h"
