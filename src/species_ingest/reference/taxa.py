"""Taxonomic groups a sync run can choose from."""

from species_ingest.schemas import TaxonGroup

AMPHIBIA = "Amphibia"
REPTILIA = "Reptilia"

TAXON_GROUPS: tuple[TaxonGroup, ...] = (
    TaxonGroup(taxon_id=27880, category="Caecilians", iconic_group=AMPHIBIA),
    TaxonGroup(taxon_id=20979, category="Frogs", iconic_group=AMPHIBIA),
    TaxonGroup(taxon_id=26718, category="Salamanders", iconic_group=AMPHIBIA),
    TaxonGroup(taxon_id=26039, category="Crocodilians", iconic_group=REPTILIA),
    TaxonGroup(taxon_id=85552, category="Lizards", iconic_group=REPTILIA),
    TaxonGroup(taxon_id=85553, category="Snakes", iconic_group=REPTILIA),
    TaxonGroup(taxon_id=26162, category="Tuataras", iconic_group=REPTILIA),
    TaxonGroup(taxon_id=39532, category="Turtles", iconic_group=REPTILIA),
)
