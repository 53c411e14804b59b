"""Flask route guards built on the access policy.

Views receive the actor explicitly; nothing below keeps a global current user.
"""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import jsonify, session

from .actor import Actor, actor_from_session


def current_actor() -> Optional[Actor]:
    return actor_from_session(session)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify(error="Please log in to continue"), 401
        return view(actor, *args, **kwargs)

    return wrapper


def requires(check: Callable[[Optional[Actor]], bool]):
    """Like `login_required`, plus a policy gate such as `policy.can_manage_group`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if actor is None:
                return jsonify(error="Please log in to continue"), 401
            if not check(actor):
                return jsonify(error="You are not allowed to access this page"), 403
            return view(actor, *args, **kwargs)

        return wrapper

    return decorator
