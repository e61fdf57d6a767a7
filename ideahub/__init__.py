"""IdeaHub — idea submission, moderation and voting API."""
