# Overview: Request decorators for API routes.

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import request, jsonify, g

CASHIER_NAME_HEADER = "X-Cashier-Name"
CASHIER_ROLE_HEADER = "X-Cashier-Role"


@dataclass(frozen=True)
class Actor:
    """Acting user as supplied by the identity collaborator. Attribution only."""
    name: str
    role: str


def require_actor(f):
    """
    Require an acting cashier identity.

    Sets g.actor from the X-Cashier-Name / X-Cashier-Role headers. Any
    identified actor may operate the drawer; the role is never used for
    authorization here.

    Returns 401 if the name header is missing or blank.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        name = (request.headers.get(CASHIER_NAME_HEADER) or "").strip()
        if not name:
            return jsonify({"error": "Cashier identity required"}), 401

        role = (request.headers.get(CASHIER_ROLE_HEADER) or "cashier").strip()
        g.actor = Actor(name=name, role=role)

        return f(*args, **kwargs)

    return decorated_function
