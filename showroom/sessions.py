# showroom/sessions.py
"""
Server-held sessions.

The browser only gets an opaque, signed session id. The session data lives
in the `sessions` table, so logging out deletes it for good: a copy of the
cookie taken earlier no longer authenticates.

Lifetime is counted from login (PERMANENT_SESSION_LIFETIME). Requests only
push it forward when SESSION_REFRESH_EACH_REQUEST is on.
"""

import secrets
from datetime import datetime

from flask.json.tag import TaggedJSONSerializer
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from .extensions import db
from .models import StoredSession


class ServerSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None):
        def on_update(self):
            self.modified = True
            self.accessed = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = sid is None
        self.modified = False
        self.accessed = False
        self.rotated = False

    def __getitem__(self, key):
        self.accessed = True
        return super().__getitem__(key)

    def get(self, key, default=None):
        self.accessed = True
        return super().get(key, default)

    def setdefault(self, key, default=None):
        self.accessed = True
        return super().setdefault(key, default)

    def rotate(self):
        """Issue a fresh id (and a fresh lifetime) when this session is saved."""
        self.rotated = True
        self.modified = True


class ServerSessionInterface(SessionInterface):
    session_class = ServerSession
    serializer = TaggedJSONSerializer()
    salt = "showroom-session"

    def get_signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    def open_session(self, app, request):
        signer = self.get_signer(app)
        if signer is None:
            return None

        value = request.cookies.get(self.get_cookie_name(app))
        if not value:
            return self.session_class()

        try:
            sid = signer.unsign(value).decode("utf-8")
        except BadSignature:
            return self.session_class()

        row = db.session.get(StoredSession, sid)
        if row is None or row.expires_at <= datetime.utcnow():
            return self.session_class()

        return self.session_class(self.serializer.loads(row.data), sid=sid)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if session.accessed:
            response.vary.add("Cookie")

        # Emptied (logout): drop the record and the cookie
        if not session:
            if session.modified:
                if session.sid:
                    StoredSession.query.filter_by(sid=session.sid).delete(synchronize_session=False)
                    db.session.commit()
                response.delete_cookie(
                    name, domain=domain, path=path, secure=secure, samesite=samesite, httponly=httponly
                )
                response.vary.add("Cookie")
            return

        if not self.should_set_cookie(app, session):
            return

        now = datetime.utcnow()
        lifetime = app.permanent_session_lifetime

        row = None
        if session.sid and not session.rotated:
            row = db.session.get(StoredSession, session.sid)

        if row is None:
            if session.sid:
                StoredSession.query.filter_by(sid=session.sid).delete(synchronize_session=False)
            StoredSession.query.filter(StoredSession.expires_at <= now).delete(synchronize_session=False)
            row = StoredSession(sid=secrets.token_urlsafe(32), expires_at=now + lifetime)
            db.session.add(row)
        elif session.permanent and app.config["SESSION_REFRESH_EACH_REQUEST"]:
            row.expires_at = now + lifetime

        row.data = self.serializer.dumps(dict(session))
        db.session.commit()

        session.sid = row.sid
        session.rotated = False

        response.set_cookie(
            name,
            self.get_signer(app).sign(row.sid).decode("utf-8"),
            expires=row.expires_at if session.permanent else None,
            httponly=httponly,
            domain=domain,
            path=path,
            secure=secure,
            samesite=samesite,
        )
        response.vary.add("Cookie")
