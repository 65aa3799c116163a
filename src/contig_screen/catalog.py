# catalog.py
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class DetectionCategory(str, Enum):
    """Screening purpose. The value doubles as the top-level output folder."""

    AMR = "AMR"
    VIRULENCE = "Virulence"
    PLASMID = "Plasmid"


Catalog = Mapping[DetectionCategory, tuple[str, ...]]


def make_catalog(mapping: Mapping[DetectionCategory, Iterable[str]]) -> Catalog:
    """Freeze a category -> databases mapping, keeping the given order."""
    frozen = {}
    for category, dbs in mapping.items():
        category = DetectionCategory(category)
        names = tuple(dict.fromkeys(dbs))
        for name in names:
            if not name or not name.strip():
                raise ValueError(f"Empty database name under {category.value}")
        frozen[category] = names
    return MappingProxyType(frozen)


#### abricate databases per detection purpose #####
DEFAULT_CATALOG = make_catalog({
    DetectionCategory.AMR:       ["resfinder", "card", "argannot", "ncbi", "megares"],
    DetectionCategory.VIRULENCE: ["vfdb"],
    DetectionCategory.PLASMID:   ["plasmidfinder"],
})
###################################################


def all_databases(catalog: Catalog) -> list[str]:
    """every database name in the catalog, once each, in first-seen order"""
    seen = {}
    for dbs in catalog.values():
        for db in dbs:
            seen.setdefault(db, None)
    return list(seen)


def catalog_pairs(catalog: Catalog) -> list[tuple[DetectionCategory, str]]:
    return [(category, db) for category, dbs in catalog.items() for db in dbs]


def _category_from_name(name: str) -> DetectionCategory:
    for category in DetectionCategory:
        if name.strip().lower() in (category.value.lower(), category.name.lower()):
            return category
    choices = ", ".join(c.value for c in DetectionCategory)
    raise ValueError(f"Unknown detection category {name!r} (choose from: {choices})")


def parse_catalog_option(values: Iterable[str]) -> Catalog:
    """
    Build a catalog from repeated CATEGORY=db1,db2 options.
    An override replaces the default catalog wholesale; categories are kept
    in enum order, databases in the order given.
    """
    mapping: dict[DetectionCategory, list[str]] = {}
    for value in values:
        if "=" not in value:
            raise ValueError(f"Expected CATEGORY=db1,db2 but got {value!r}")
        name, _, dbs = value.partition("=")
        category = _category_from_name(name)
        names = [db.strip() for db in dbs.split(",") if db.strip()]
        if not names:
            raise ValueError(f"No databases given for {category.value}")
        bucket = mapping.setdefault(category, [])
        bucket.extend(db for db in names if db not in bucket)
    ordered = {c: mapping[c] for c in DetectionCategory if c in mapping}
    return make_catalog(ordered)
