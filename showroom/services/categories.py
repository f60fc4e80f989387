# showroom/services/categories.py
"""
Category logic:
- build the two-level tree (main category -> subcategories)
- flat listing for older clients
- seed the merchandising category list

Categories are keyed by the showroom's numeric merchandising code.
A subcategory may share its parent's code (e.g. 220 BEDROOM / 220 MASTER BEDROOM).
"""

from typing import Any, Dict, Iterable, List

from ..extensions import db
from ..models import Category

# (code, name, [(code, name), ...]) in display order
MERCHANDISING_CATEGORIES = [
    ("220", "BEDROOM", [
        ("220", "MASTER BEDROOM"),
        ("221", "YOUTH BEDROOM"),
        ("222", "DAYBEDS"),
        ("223", "BUNKBEDS"),
        ("224", "METAL BEDS"),
        ("225", "WOOD HEADBOARDS/NON CASEGOODS"),
    ]),
    ("250", "DINING ROOM", [
        ("250", "CASUAL DINING"),
        ("251", "FORMAL DINING"),
        ("252", "DINING UNIQUE PIECE"),
        ("253", "STOOLS"),
    ]),
    ("360", "OCCASIONAL TABLES", []),
    ("420", "ACCESSORIES", [
        ("420", "LAMPS"),
        ("430", "WALL ITEMS"),
        ("440", "PLANTS AND TREES"),
        ("450", "TEXTILES AND SEASONAL ITEMS"),
        ("460", "SMALL - TABLE TOPS"),
        ("470", "LARGE - FLOOR STANDING"),
        ("480", "AREA RUGS"),
    ]),
    ("540", "UPHOLSTERY", [
        ("540", "STATIONARY UPHOLSTERY"),
        ("541", "LEATHER/FABRIC COMBO"),
        ("543", "FABRIC & MISC FOR STATIONARY GROUP"),
        ("544", "SECTIONALS"),
    ]),
    ("550", "LEATHER", [
        ("550", "LEATHER"),
        ("553", "LEATHER / VINYL"),
    ]),
    ("570", "RECLINING UPHOLSTERY", [
        ("570", "RECLINING UPHOLSTERY"),
        ("571", "RECLINING LEATHER"),
        ("579", "RECLINING SECTIONALS"),
        ("580", "STATIONARY FOR MOTION UPHOLSTERY"),
    ]),
    ("590", "STATIONARY CHAIRS", [
        ("590", "STATIONARY CHAIRS"),
        ("593", "SWIVEL ROCKER"),
        ("596", "LEATHER ACCENT CHAIRS"),
    ]),
    ("620", "FABRIC RECLINERS", [
        ("620", "FABRIC RECLINERS"),
        ("622", "LEATHER RECLINERS"),
        ("623", "LIFT CHAIRS"),
    ]),
]


def _sort_key(row: Dict[str, Any]):
    return (row.get("display_order") or 0, row.get("name") or "")


def build_category_tree(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Turn flat category rows into [{...main fields, "subcategories": [...]}, ...].

    Rows with parent_id None are main categories; every other row is attached
    to the main category whose id equals its parent_id. Both levels are sorted
    by (display_order, name). Subcategories whose parent is not a main
    category in `rows` are left out, so the tree never goes deeper than two.
    """
    rows = sorted((dict(r) for r in rows), key=_sort_key)

    mains = [r for r in rows if r.get("parent_id") is None]
    children: Dict[Any, List[Dict[str, Any]]] = {m["id"]: [] for m in mains}

    seen = set()
    for row in rows:
        parent_id = row.get("parent_id")
        if parent_id is None or parent_id not in children or row["id"] in seen:
            continue
        seen.add(row["id"])
        children[parent_id].append(row)

    return [{**main, "subcategories": children[main["id"]]} for main in mains]


def _active_categories():
    return (
        Category.query.filter(Category.is_active.is_(True))
        .order_by(Category.display_order, Category.name)
        .all()
    )


def category_tree() -> List[Dict[str, Any]]:
    return build_category_tree(c.to_dict() for c in _active_categories())


def list_categories_flat() -> List[Dict[str, Any]]:
    return [
        {"id": c.id, "code": c.code, "name": c.name, "parent_id": c.parent_id}
        for c in _active_categories()
    ]


def seed_categories() -> int:
    """
    Insert the merchandising categories that are not there yet.
    Matching is by (code, name, parent) so running it twice changes nothing.
    Returns the number of rows inserted.
    """
    inserted = 0

    for order, (code, name, subs) in enumerate(MERCHANDISING_CATEGORIES):
        main = Category.query.filter_by(code=code, name=name, parent_id=None).first()
        if main is None:
            main = Category(code=code, name=name, parent_id=None, display_order=order)
            db.session.add(main)
            db.session.flush()
            inserted += 1

        for sub_order, (sub_code, sub_name) in enumerate(subs):
            exists = Category.query.filter_by(code=sub_code, name=sub_name, parent_id=main.id).first()
            if exists is None:
                db.session.add(
                    Category(code=sub_code, name=sub_name, parent_id=main.id, display_order=sub_order)
                )
                inserted += 1

    db.session.commit()
    return inserted
