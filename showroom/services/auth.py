# showroom/services/auth.py
"""
Session login for the admin side.

The session (server-held, see sessions.py) carries user_id + username.
On every request that is turned into an Identity on flask.g (or None
for anonymous visitors), and protected views receive it as the
`identity` keyword argument.
"""

from collections import namedtuple
from functools import wraps

from flask import current_app, g, session
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import AuthenticationError, UserExistsError, ValidationError
from ..extensions import db
from ..models import User

Identity = namedtuple("Identity", ["user_id", "username"])

INVALID_CREDENTIALS = "Invalid username or password"


def authenticate(username: str, password: str) -> User:
    """
    Return the active user for these credentials.
    Unknown user and wrong password fail with the same message.
    """
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required")

    user = User.query.filter_by(username=username, is_active=True).first()
    if user is None or not check_password_hash(user.password, password):
        current_app.logger.info("Failed login for %r", username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    return user


def login_user(user: User):
    session.clear()
    session.rotate()
    session.permanent = True
    session["user_id"] = user.id
    session["username"] = user.username
    g.identity = Identity(user.id, user.username)
    current_app.logger.info("User %s logged in", user.username)


def logout_user():
    identity = current_identity()
    session.clear()
    g.identity = None
    if identity:
        current_app.logger.info("User %s logged out", identity.username)


def load_identity():
    """before_request hook: session -> g.identity."""
    user_id = session.get("user_id")
    g.identity = Identity(user_id, session.get("username")) if user_id else None


def current_identity():
    return g.get("identity")


def login_required(view):
    """401 for anonymous requests; passes identity= to the view otherwise."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            raise AuthenticationError()
        return view(*args, identity=identity, **kwargs)

    return wrapped


def create_user(username: str, password: str, email=None, role: str = "admin") -> User:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required")

    user = User(
        username=username,
        password=generate_password_hash(password),
        email=(email or "").strip() or None,
        role=role or "admin",
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if "UNIQUE" in str(e.orig).upper():
            raise UserExistsError(username) from e
        raise
    return user
