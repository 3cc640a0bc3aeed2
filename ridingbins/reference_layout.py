"""
Reference layouts of ridings on a regular grid.

A reference layout fixes, for one boundary scope, the canonical grid cell
of every riding and the anchor cell of every region. Two scopes ship with
the package as CSV tables in ``ridingbins/data``:

- ``federal``: the 338 federal electoral districts, grouped by province
  and territory. Riding codes are the five-digit federal codes whose first
  two digits are the province's SGC code.
- ``provincial:QC``: the 125 Quebec provincial electoral divisions, grouped
  by administrative region.

Region anchors follow rough geography (west to east, north on top). The
canonical cells inside a region are schematic: they fill the region's
block column by column in a serpentine and say nothing about where a
riding lies within its region.

Layouts are read once per process and never modified afterwards.
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping
import logging
import os

import pandas as pd

from ridingbins.exceptions import UnsupportedScope
from ridingbins.tools import region_block_shape

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')

#: SGC province codes and their two-letter abbreviations
PROVINCE_CODES = MappingProxyType({
    10: 'NL',
    11: 'PE',
    12: 'NS',
    13: 'NB',
    24: 'QC',
    35: 'ON',
    46: 'MB',
    47: 'SK',
    48: 'AB',
    59: 'BC',
    60: 'YT',
    61: 'NT',
    62: 'NU',
})

PROVINCE_NAMES = MappingProxyType({
    'newfoundland and labrador': 'NL',
    'prince edward island': 'PE',
    'nova scotia': 'NS',
    'new brunswick': 'NB',
    'quebec': 'QC',
    'québec': 'QC',
    'ontario': 'ON',
    'manitoba': 'MB',
    'saskatchewan': 'SK',
    'alberta': 'AB',
    'british columbia': 'BC',
    'yukon': 'YT',
    'northwest territories': 'NT',
    'nunavut': 'NU',
})

FEDERAL_SCOPE = 'federal'
QUEBEC_SCOPE = 'provincial:QC'


def normalize_region(value: Any) -> str:
    """
    Normalize a province identifier to its two-letter abbreviation.

    Accepts SGC codes (``24`` or ``"24"``), abbreviations (``"qc"``) and
    English or French names (``"Quebec"``, ``"Québec"``).

    Parameters
    ----------
    value : int or str
        Province identifier.

    Returns
    -------
    str
        Two-letter abbreviation, e.g. ``"QC"``.

    Raises
    ------
    UnsupportedScope
        If the identifier does not name a Canadian province or territory.
    """
    if isinstance(value, str):
        key = value.strip()
        if key.isdecimal():
            value = int(key)
        elif key.upper() in PROVINCE_CODES.values():
            return key.upper()
        elif key.casefold() in PROVINCE_NAMES:
            return PROVINCE_NAMES[key.casefold()]
        else:
            raise UnsupportedScope(f"region:{value}", f"Unknown province or territory '{value}'")

    if isinstance(value, bool) or value not in PROVINCE_CODES:
        raise UnsupportedScope(f"region:{value}", f"Unknown province or territory '{value}'")
    return PROVINCE_CODES[value]


class ReferenceLayout():
    """
    Canonical grid positions of the ridings of one boundary scope.

    Parameters
    ----------
    name : str
        Scope name, e.g. ``"federal"``.
    positions : mapping
        Riding code to canonical ``(row, col)``.
    regions : mapping
        Riding code to region identifier.
    anchors : mapping
        Region identifier to the ``(row, col)`` of the top-left cell of the
        block the region is packed into when ridings are arranged.

    Attributes
    ----------
    positions, regions, anchors : types.MappingProxyType
        Read-only views of the inputs.

    Raises
    ------
    ValueError
        If two ridings share a canonical cell, if a region has no anchor,
        or if two arranged region blocks would overlap.
    """

    def __init__(
        self,
        name: str,
        positions: Mapping[int, tuple[int, int]],
        regions: Mapping[int, str],
        anchors: Mapping[str, tuple[int, int]],
    ) -> None:

        if set(positions) != set(regions):
            raise ValueError(f"{name}: every riding needs both a position and a region")

        self.name = name
        self.positions = MappingProxyType({int(k): (int(r), int(c)) for k, (r, c) in positions.items()})
        self.regions = MappingProxyType({int(k): v for k, v in regions.items()})
        self.anchors = MappingProxyType({k: (int(r), int(c)) for k, (r, c) in anchors.items()})

        self._region_ridings = {}
        for code in sorted(self.regions):
            self._region_ridings.setdefault(self.regions[code], []).append(code)

        self._validate()

    def _validate(self) -> None:
        """Check that canonical cells and arranged blocks never overlap."""
        seen = {}
        for code, cell in self.positions.items():
            if cell in seen:
                raise ValueError(
                    f"{self.name}: ridings {seen[cell]} and {code} share canonical cell {cell}"
                )
            seen[cell] = code

        missing = set(self._region_ridings) - set(self.anchors)
        if missing:
            raise ValueError(f"{self.name}: regions without anchor: {sorted(missing)}")

        occupied = {}
        for region, codes in self._region_ridings.items():
            n_rows, n_cols = region_block_shape(len(codes))
            row0, col0 = self.anchors[region]
            for r in range(row0, row0 + n_rows):
                for c in range(col0, col0 + n_cols):
                    if (r, c) in occupied:
                        raise ValueError(
                            f"{self.name}: arranged blocks of {occupied[(r, c)]} "
                            f"and {region} overlap at {(r, c)}"
                        )
                    occupied[(r, c)] = region

    @classmethod
    def from_csv(cls, name: str, bins_file: str, anchors_file: str) -> "ReferenceLayout":
        """
        Read a reference layout from its two CSV tables.

        Parameters
        ----------
        name : str
            Scope name.
        bins_file : str
            Table with columns ``riding_code, region, row, col``.
        anchors_file : str
            Table with columns ``region, row, col``.

        Returns
        -------
        ReferenceLayout
        """
        bins = pd.read_csv(bins_file, dtype={'region': str}, encoding='utf-8')
        anchors = pd.read_csv(anchors_file, dtype={'region': str}, encoding='utf-8')

        positions = {
            code: (row, col)
            for code, row, col in zip(bins.riding_code, bins.row, bins.col)
        }
        regions = dict(zip(bins.riding_code, bins.region))
        region_anchors = {
            region: (row, col)
            for region, row, col in zip(anchors.region, anchors.row, anchors.col)
        }
        layout = cls(name, positions, regions, region_anchors)
        logger.debug("loaded reference layout %s: %d ridings in %d regions",
                     name, len(layout), len(layout.anchors))
        return layout

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, code: object) -> bool:
        return code in self.positions

    def __repr__(self) -> str:
        return f"ReferenceLayout({self.name!r}, ridings={len(self)}, regions={len(self.anchors)})"

    def region_ridings(self, region: str) -> list[int]:
        """Riding codes of a region in ascending order."""
        return list(self._region_ridings.get(region, []))

    def ordered_regions(self) -> list[str]:
        """Regions sorted by anchor, top to bottom then left to right."""
        return sorted(self.anchors, key=lambda region: (self.anchors[region], region))

    def bounds(self) -> tuple[int, int]:
        """
        Size of the canonical layout.

        Returns
        -------
        tuple of int
            ``(n_rows, n_cols)`` spanned by the canonical positions.
        """
        rows = [r for r, _ in self.positions.values()]
        cols = [c for _, c in self.positions.values()]
        return max(rows) + 1, max(cols) + 1


@lru_cache(maxsize=None)
def federal_layout() -> ReferenceLayout:
    """The federal electoral district layout."""
    return ReferenceLayout.from_csv(
        FEDERAL_SCOPE,
        os.path.join(DATA_DIR, 'federal_riding_bins.csv'),
        os.path.join(DATA_DIR, 'federal_region_anchors.csv'),
    )


@lru_cache(maxsize=None)
def quebec_layout() -> ReferenceLayout:
    """The Quebec provincial electoral division layout."""
    return ReferenceLayout.from_csv(
        QUEBEC_SCOPE,
        os.path.join(DATA_DIR, 'quebec_riding_bins.csv'),
        os.path.join(DATA_DIR, 'quebec_region_anchors.csv'),
    )


PROVINCIAL_LAYOUTS = MappingProxyType({
    'QC': quebec_layout,
})


def get_reference_layout(provincial: bool = False, province: Any = None) -> ReferenceLayout:
    """
    Select the reference layout for a boundary scope.

    Parameters
    ----------
    provincial : bool, optional
        If True, use the provincial electoral divisions of ``province``
        instead of the federal districts (default: False).
    province : int or str, optional
        Province identifier. Required when ``provincial`` is True.
        Ignored here for federal layouts.

    Returns
    -------
    ReferenceLayout

    Raises
    ------
    UnsupportedScope
        If ``provincial`` is True and no provincial layout exists for
        ``province``. Only Quebec is currently supported.
    """
    if not provincial:
        return federal_layout()

    if province is None:
        raise UnsupportedScope('provincial', "Provincial layouts require a province")
    try:
        abbrev = normalize_region(province)
    except UnsupportedScope:
        raise UnsupportedScope(f"provincial:{province}") from None

    if abbrev not in PROVINCIAL_LAYOUTS:
        raise UnsupportedScope(
            f"provincial:{abbrev}",
            f"No provincial riding layout for {abbrev}; supported: {sorted(PROVINCIAL_LAYOUTS)}",
        )
    return PROVINCIAL_LAYOUTS[abbrev]()
