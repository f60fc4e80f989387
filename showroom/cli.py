# showroom/cli.py
"""
Maintenance commands (run with `flask --app app <command>`):

  init-db [--sample]     create tables + categories (+ demo vignettes/products)
  seed-categories        load the merchandising category list
  create-user USERNAME   add an admin login
  create-admin           add the default "admin" login if it's missing
"""

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import UserExistsError, ValidationError
from .extensions import db
from .models import Product, User, Vignette, VignetteProduct
from .services.auth import create_user
from .services.categories import seed_categories

SAMPLE_VIGNETTES = [
    {"name": "Modern Living", "description": "Contemporary living room setup with clean lines",
     "location": "Section A1", "theme": "Modern"},
    {"name": "Cozy Family Room", "description": "Warm and inviting family space",
     "location": "Section B2", "theme": "Traditional"},
]

SAMPLE_PRODUCTS = [
    {"name": "Cloud Comfort Sofa", "category": "Sofa", "description": "Luxurious 3-seater sofa with deep cushions",
     "manufacturer": "ComfortCo", "price": 1299.99, "color": "Charcoal Gray"},
    {"name": "Elegance Armchair", "category": "Chair", "description": "Mid-century modern armchair with wooden legs",
     "manufacturer": "DesignPlus", "price": 449.99, "color": "Navy Blue"},
    {"name": "Geometric Area Rug", "category": "Rug", "description": "Hand-tufted wool rug with modern pattern",
     "manufacturer": "RugMasters", "price": 599.99, "color": "Multi-color"},
    {"name": "Glass-Top Coffee Table", "category": "Coffee Table", "description": "Tempered glass with chrome base",
     "manufacturer": "ModernHome", "price": 329.99, "color": "Clear/Chrome"},
    {"name": "Amber Table Lamp", "category": "Lamp", "description": "Ceramic base with fabric shade",
     "manufacturer": "LightUp", "price": 89.99, "color": "Amber/White"},
]


def load_sample_data() -> bool:
    """Demo vignettes/products; skipped when any vignette exists."""
    if Vignette.query.first() is not None:
        return False

    vignettes = [Vignette(**v) for v in SAMPLE_VIGNETTES]
    products = [Product(**p) for p in SAMPLE_PRODUCTS]
    db.session.add_all(vignettes + products)
    db.session.flush()

    for position, product in enumerate(products, start=1):
        db.session.add(VignetteProduct(vignette_id=vignettes[0].id, product_id=product.id, position=position))

    db.session.commit()
    return True


@click.command("init-db")
@with_appcontext
@click.option("--sample", is_flag=True, help="Also add demo vignettes and products.")
def init_db_command(sample):
    """Create tables and load the category list."""
    db.create_all()
    added = seed_categories()
    click.echo(f"Database ready ({added} categories added).")

    if sample:
        if load_sample_data():
            click.echo("Sample vignettes and products added.")
        else:
            click.echo("Sample data skipped (vignettes already exist).")


@click.command("seed-categories")
@with_appcontext
def seed_categories_command():
    added = seed_categories()
    click.echo(f"{added} categories added.")


@click.command("create-user")
@with_appcontext
@click.argument("username")
@click.password_option()
@click.option("--email", default=None)
@click.option("--role", default="admin", show_default=True)
def create_user_command(username, password, email, role):
    """Add a login for the admin screens."""
    try:
        user = create_user(username, password, email=email, role=role)
    except (UserExistsError, ValidationError) as e:
        raise click.ClickException(e.message)

    current_app.logger.info("Created user %s", user.username)
    click.echo(f"User '{user.username}' created (id {user.id}).")


@click.command("create-admin")
@with_appcontext
@click.password_option()
@click.option("--email", default=None)
def create_admin_command(password, email):
    """Create the default 'admin' login if it doesn't exist yet."""
    if User.query.filter_by(username="admin").first() is not None:
        click.echo("User 'admin' already exists.")
        return

    user = create_user("admin", password, email=email)
    click.echo(f"User '{user.username}' created (id {user.id}).")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_categories_command)
    app.cli.add_command(create_user_command)
    app.cli.add_command(create_admin_command)
