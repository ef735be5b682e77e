# Overview: Flask CLI command groups for bootstrap and account management.

# backend/cafeteria/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create all tables (idempotent; existing tables are left alone).
# - python -m flask system seed-menu [--with-inventory]
#   Insert the standard South Indian menu (and kitchen stock) if missing.
#
# Accounts:
# - python -m flask users create --name "Admin" --email admin@cafeteria.local --password "Password123" --role admin
#   Create a user (prompts if options are omitted).
# - python -m flask users issue-token admin@cafeteria.local
#   Mint a bearer session token for API access.
# - python -m flask users revoke-token <token>
#   Revoke a bearer token before it expires.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import InventoryItem, MenuItem, User
from .models.auth import VALID_ROLES
from .money import rupees_to_paise
from .services.auth_service import PasswordValidationError, create_user, normalize_email
from .services.session_service import create_session, revoke_session


# (name, rupees, category, calories, popular, ingredients)
STANDARD_MENU = [
    ("Masala Dosa", 60, "breakfast", 250, True, ["Rice batter", "Urad dal", "Potatoes", "Onions", "Spices"]),
    ("Idli Sambar", 50, "breakfast", 180, False, ["Rice", "Urad dal", "Lentils", "Vegetables", "Spices"]),
    ("Pongal", 55, "breakfast", 310, False, ["Rice", "Moong dal", "Ghee", "Cashews", "Spices"]),
    ("South Indian Thali", 120, "lunch", 750, True, ["Rice", "Sambar", "Rasam", "Vegetables", "Curd", "Papad"]),
    ("Chettinad Chicken Curry", 160, "lunch", 450, False, ["Chicken", "Onions", "Tomatoes", "Chettinad spices", "Coconut"]),
    ("Bisi Bele Bath", 85, "lunch", 380, False, ["Rice", "Toor dal", "Vegetables", "Tamarind", "Spices"]),
    ("Appam with Stew", 95, "dinner", 320, False, ["Rice flour", "Coconut milk", "Vegetables/Chicken", "Spices"]),
    ("Hyderabadi Biryani", 180, "dinner", 650, True, ["Basmati rice", "Chicken/Mutton", "Yogurt", "Saffron", "Biryani spices"]),
    ("Medu Vada", 45, "snacks", 220, False, ["Urad dal", "Rice flour", "Onions", "Spices"]),
    ("Mysore Pak", 25, "desserts", 180, False, ["Gram flour", "Sugar", "Ghee"]),
    ("Filter Coffee", 30, "beverages", 90, True, ["Coffee powder", "Milk", "Sugar"]),
    ("Tender Coconut Water", 40, "beverages", 45, False, ["Fresh coconut water"]),
]

# (name, category, quantity, unit, threshold)
STANDARD_INVENTORY = [
    ("Rice", "Grains", 25, "kg", 5),
    ("Urad Dal", "Lentils", 10, "kg", 2),
    ("Potatoes", "Vegetables", 15, "kg", 3),
    ("Coconut", "Fruits", 30, "pieces", 5),
    ("Coffee Powder", "Beverages", 5, "kg", 1),
    ("Chicken", "Meat", 8, "kg", 2),
    ("Basmati Rice", "Grains", 12, "kg", 3),
    ("Ghee", "Dairy", 4, "liter", 1),
    ("Tomatoes", "Vegetables", 7, "kg", 2),
    ("South Indian Spice Mix", "Spices", 3, "kg", 1),
]


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('seed-menu')
@click.option('--with-inventory', is_flag=True, help='Also seed kitchen stock items')
@with_appcontext
def seed_menu(with_inventory):
    """Insert standard menu items by name; existing names are skipped."""
    existing = {name for (name,) in db.session.query(MenuItem.name).all()}
    added = 0
    for name, rupees, category, calories, popular, ingredients in STANDARD_MENU:
        if name in existing:
            continue
        db.session.add(MenuItem(
            name=name,
            price_paise=rupees_to_paise(rupees),
            category=category,
            calories=calories,
            is_popular=popular,
            ingredients=ingredients,
            tags=[],
        ))
        added += 1

    stocked = 0
    if with_inventory:
        have = {name for (name,) in db.session.query(InventoryItem.name).all()}
        for name, category, quantity, unit, threshold in STANDARD_INVENTORY:
            if name in have:
                continue
            db.session.add(InventoryItem(
                name=name, category=category, quantity=quantity, unit=unit, threshold=threshold,
            ))
            stocked += 1

    db.session.commit()
    click.echo(f"PASS Added {added} menu items ({len(STANDARD_MENU) - added} already present)")
    if with_inventory:
        click.echo(f"PASS Added {stocked} inventory items")


@click.group('users')
def users_group():
    """Account commands."""


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(VALID_ROLES), prompt=True, help='Role')
@with_appcontext
def create_user_cli(name, email, password, role):
    """
    Create a user.

    Password must be 8+ characters with at least one letter and one digit.
    """
    try:
        user = create_user(name, email, password, role)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        raise SystemExit(1)
    except ValueError as e:
        click.echo(f"FAIL Failed to create user: {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.name} ({user.email}) with role '{user.role}'")


@users_group.command('issue-token')
@click.argument('email')
@with_appcontext
def issue_token_cli(email):
    """Print a new bearer token for EMAIL (valid 24h, 2h idle)."""
    user = db.session.query(User).filter_by(email=normalize_email(email)).first()
    if not user:
        click.echo(f"FAIL No user with email {email}")
        raise SystemExit(1)

    try:
        session, token = create_session(user.id)
    except ValueError as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(token)
    click.echo(f"     Expires at {session.expires_at.isoformat()}Z", err=True)


@users_group.command('revoke-token')
@click.argument('token')
@with_appcontext
def revoke_token_cli(token):
    """Revoke TOKEN immediately."""
    if not revoke_session(token, reason="Revoked from CLI"):
        click.echo("FAIL Token not found or already revoked")
        raise SystemExit(1)
    click.echo("PASS Token revoked")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
