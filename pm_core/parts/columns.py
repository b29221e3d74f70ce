# pm_core/parts/columns.py
"""
Closed set of part fields that tracking rules may test.

The values are the column names of the imported parts list (Dutch workshop
vocabulary, as they appear in the CNC export); labels are what the rule
editor shows in its dropdown.
"""
from __future__ import annotations

from django.db import models


class PartColumn(models.TextChoices):
    MATERIAAL = "materiaal", "Materiaal"
    DIKTE = "dikte", "Dikte"
    NERF = "nerf", "Nerf"
    LENGTE = "lengte", "Lengte"
    BREEDTE = "breedte", "Breedte"
    AANTAL = "aantal", "Aantal"
    CNC_POS = "cnc_pos", "CNC Pos"
    WAND_NAAM = "wand_naam", "Wand Naam"
    AFPLAK_BOVEN = "afplak_boven", "Afplak Boven"
    AFPLAK_ONDER = "afplak_onder", "Afplak Onder"
    AFPLAK_LINKS = "afplak_links", "Afplak Links"
    AFPLAK_RECHTS = "afplak_rechts", "Afplak Rechts"
    COMMENTAAR = "commentaar", "Commentaar"
    COMMENTAAR_2 = "commentaar_2", "Commentaar 2"
    CNCPRG1 = "cncprg1", "CNC Prg 1"
    CNCPRG2 = "cncprg2", "CNC Prg 2"
    ABD = "abd", "ABD"
    DOORLOPENDE_NERF = "doorlopende_nerf", "Doorlopende Nerf"


PART_COLUMN_NAMES: frozenset[str] = frozenset(PartColumn.values)

INTEGER_COLUMNS: frozenset[str] = frozenset({PartColumn.AANTAL.value})

# Header labels of the CSV export -> column name. Rows handed to the importer
# may be keyed by either form.
CSV_HEADER_MAP: dict[str, str] = {
    "Materiaal": PartColumn.MATERIAAL.value,
    "Dikte": PartColumn.DIKTE.value,
    "Nerf": PartColumn.NERF.value,
    "Lengte": PartColumn.LENGTE.value,
    "Breedte": PartColumn.BREEDTE.value,
    "Aantal": PartColumn.AANTAL.value,
    "CNC pos": PartColumn.CNC_POS.value,
    "CNC  pos": PartColumn.CNC_POS.value,
    "Wand Naam": PartColumn.WAND_NAAM.value,
    "Afplak Boven": PartColumn.AFPLAK_BOVEN.value,
    "Afplak Onder": PartColumn.AFPLAK_ONDER.value,
    "Afplak Links": PartColumn.AFPLAK_LINKS.value,
    "Afplak Rechts": PartColumn.AFPLAK_RECHTS.value,
    "Commentaar": PartColumn.COMMENTAAR.value,
    "Commentaar 2": PartColumn.COMMENTAAR_2.value,
    "CNCPRG1": PartColumn.CNCPRG1.value,
    "CNCPRG2": PartColumn.CNCPRG2.value,
    "ABD": PartColumn.ABD.value,
    "Doorlopende nerf": PartColumn.DOORLOPENDE_NERF.value,
}

# Not a rule column, but carried by the import.
IMAGE_HEADER = "Afbeelding"
IMAGE_FIELD = "afbeelding"


def resolve_column(key: str) -> str | None:
    """
    Map an incoming row key (column name or CSV header label) to a PartColumn value.
    """
    if key is None:
        return None
    k = str(key).strip()
    if k in PART_COLUMN_NAMES:
        return k
    return CSV_HEADER_MAP.get(k)
