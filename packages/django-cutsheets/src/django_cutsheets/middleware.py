"""Middleware for resolving the acting principal.

Optional middleware that resolves the Actor for the authenticated user and
makes it available to cut sheet operations via thread-local storage.

Usage in settings.py:

    MIDDLEWARE = [
        ...
        'django.contrib.auth.middleware.AuthenticationMiddleware',
        'django_cutsheets.middleware.ActorContextMiddleware',  # After auth
        ...
    ]

Then in your code the actor argument can be omitted:

    from django_cutsheets.services import remove_cut
    remove_cut(cut_sheet_id, 'ribeye', 'Rib-Eye Steaks', 'Not enough yield')
"""
import threading

_thread_locals = threading.local()


def get_current_actor():
    """Get the current actor from thread-local storage."""
    return getattr(_thread_locals, 'actor', None)


def set_actor_context(actor=None):
    """Set the actor in thread-local storage."""
    _thread_locals.actor = actor


def clear_actor_context():
    """Clear the actor from thread-local storage."""
    _thread_locals.actor = None


class ActorContextMiddleware:
    """Resolve the cut sheet Actor for ``request.user`` for the request's duration."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        from .actors import resolve_actor

        actor = None
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            actor = resolve_actor(user)

        request.cutsheets_actor = actor
        set_actor_context(actor)

        try:
            response = self.get_response(request)
        finally:
            # Always clear context after request
            clear_actor_context()

        return response
