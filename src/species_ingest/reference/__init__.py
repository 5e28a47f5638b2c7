"""Static reference data.

Data that doesn't change with API calls: the taxonomic groups a run may
choose from.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from species_ingest.reference.taxa import AMPHIBIA as AMPHIBIA
from species_ingest.reference.taxa import REPTILIA as REPTILIA
from species_ingest.reference.taxa import TAXON_GROUPS as TAXON_GROUPS
