from typing import Callable

from fastapi import Request
from supabase import create_client, Client, ClientOptions

from app.core.config import Settings

# Builds a fresh client; given an access token, table calls run as that user.
ClientFactory = Callable[[str | None], Client]


def create_supabase_client(settings: Settings, access_token: str | None = None) -> Client:
    """
    Create a Supabase client with the anon/public key.

    Without `access_token` this is the shared client built once in
    `create_app()` and handed to routers through `get_supabase`. It is
    only used for stateless calls (token lookups, public reads) and
    never signs anybody in or out.

    With `access_token` the client is request scoped: PostgREST calls
    carry `Authorization: Bearer <token>`, so RLS sees the caller as
    `auth.uid()`.

    Session persistence and auto refresh are off: the backend never keeps
    a user session of its own, every request brings its own access token.
    """
    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        headers={"x-application-name": "nimart-api"},
    )
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY, options)
    if access_token:
        client.postgrest.auth(access_token)
    return client


def client_factory_for(settings: Settings) -> ClientFactory:
    def factory(access_token: str | None = None) -> Client:
        return create_supabase_client(settings, access_token)

    return factory


def get_supabase(request: Request) -> Client:
    """FastAPI dependency returning the shared client built at startup."""
    return request.app.state.supabase


def get_client_factory(request: Request) -> ClientFactory:
    return request.app.state.client_factory
