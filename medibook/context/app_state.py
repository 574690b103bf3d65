from flask import g, session

from medibook.context.cart import CartContext
from medibook.context.session import SessionContext


class AppState:
    """Session and cart contexts for one request, backed by the session cookie."""

    def __init__(self, storage):
        self.session = SessionContext(storage)
        self.cart = CartContext(storage)

    def resolve(self):
        self.session.resolve()
        return self


def load_app_state():
    g.app_state = AppState(session).resolve()


def current_state():
    if "app_state" not in g:
        load_app_state()
    return g.app_state
