"""
Route gate for the admin area.

The browser app asks for a decision on every navigation (history push/pop);
the decision depends only on the path and whether the session is an admin.
"""

from dataclasses import dataclass
from typing import Optional

ADMIN_PATH = "/admin"
LOGIN_PATH = "/login"

PUBLIC_VIEW = "public"
LOGIN_VIEW = "login"
ADMIN_VIEW = "admin"


@dataclass(frozen=True)
class RouteDecision:
    view: str
    redirect_to: Optional[str] = None


def resolve_route(path: str, is_admin: bool) -> RouteDecision:
    """
    Decide what to render for a path.

    /admin renders the dashboard for admins and redirects everyone else to
    /login; /login redirects admins to /admin; every other path is public.
    """
    if path == ADMIN_PATH:
        if not is_admin:
            return RouteDecision(view=LOGIN_VIEW, redirect_to=LOGIN_PATH)
        return RouteDecision(view=ADMIN_VIEW)

    if path == LOGIN_PATH:
        if is_admin:
            return RouteDecision(view=ADMIN_VIEW, redirect_to=ADMIN_PATH)
        return RouteDecision(view=LOGIN_VIEW)

    return RouteDecision(view=PUBLIC_VIEW)
