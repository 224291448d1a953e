from fastapi import Request

from nest_admin.db.base import DatabaseGateway
from nest_admin.sessions import SessionCookieSigner, SessionStore


def get_database(request: Request) -> DatabaseGateway:
    return request.app.state.db


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_cookie_signer(request: Request) -> SessionCookieSigner:
    return request.app.state.cookie_signer
