"""
Session gate: a single allow-listed operator may use the dashboard.
"""
import logging
from enum import Enum

import aws_config
from .errors import AuthError

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"


class SessionGate:
    def __init__(self, provider, admin_email=aws_config.ADMIN_EMAIL):
        self.provider = provider
        self.admin_email = admin_email
        self.state = SessionState.UNAUTHENTICATED
        self.identity = None
        # a signed-in identity that is not the admin
        self.rejected = None
        self._listeners = []

    @property
    def is_authorized(self):
        return self.state is SessionState.AUTHORIZED

    def subscribe(self, listener):
        """listener(authorized: bool) is called on every state change."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set_state(self, state):
        if state is self.state:
            return
        self.state = state
        for listener in list(self._listeners):
            listener(self.is_authorized)

    def admits(self, identity):
        return identity is not None and identity.email == self.admin_email

    def sign_in(self, username, password):
        """
        Ask the identity provider to sign in. Returns True when the
        resulting identity is the admin. Provider failures raise AuthError.
        """
        identity = self.provider.sign_in(username, password)
        return self.accept(identity)

    def accept(self, identity):
        if not self.admits(identity):
            logger.warning("Identity %s is not allowed to administer the store",
                           getattr(identity, "email", None))
            self.identity = None
            self.rejected = identity
            self._set_state(SessionState.UNAUTHENTICATED)
            return False
        self.identity = identity
        self.rejected = None
        logger.info("Admin %s signed in", identity.email)
        self._set_state(SessionState.AUTHORIZED)
        return True

    def sign_out(self):
        identity = self.identity or self.rejected
        self.identity = None
        self.rejected = None
        if identity is not None:
            self.provider.sign_out(identity)
            logger.info("%s signed out", identity.email)
        self._set_state(SessionState.UNAUTHENTICATED)

    def require(self):
        if not self.is_authorized:
            raise AuthError("Admin session required")
