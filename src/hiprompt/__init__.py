"""
hiprompt - share, discover and like AI prompts on a Supabase backend.

Usage:
    from hiprompt.app import open_app

    async with open_app() as app:
        result = await app.prompts.list_public(app.sessions.session)
"""

__version__ = "0.1.0"
