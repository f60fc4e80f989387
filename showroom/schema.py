# showroom/schema.py
from sqlalchemy import text

from .extensions import db


def ensure_product_category_id_column() -> bool:
    """
    Adds products.category_id if it's missing (SQLite schema migration-lite)
    and back-fills it from the legacy free-text category.
    Safe to run on every startup. Returns True when the column was added.
    """
    if db.engine.dialect.name != "sqlite":
        return False

    # SQLite: PRAGMA table_info(table_name) gives columns
    cols = db.session.execute(text("PRAGMA table_info(products)")).fetchall()
    col_names = {c[1] for c in cols}  # column name is index 1

    if not col_names or "category_id" in col_names:
        return False

    db.session.execute(
        text("ALTER TABLE products ADD COLUMN category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL")
    )
    db.session.execute(text("CREATE INDEX IF NOT EXISTS idx_products_category_id ON products(category_id)"))
    # Legacy text that matches exactly one active category name gets linked
    db.session.execute(text("""
        UPDATE products
        SET category_id = (
            SELECT CASE WHEN COUNT(*) = 1 THEN MIN(c.id) END
            FROM categories c
            WHERE c.is_active = 1 AND UPPER(c.name) = UPPER(products.category)
        )
        WHERE category_id IS NULL AND category IS NOT NULL
    """))
    db.session.commit()
    return True
