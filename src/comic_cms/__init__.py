"""Comic CMS backend: submissions, moderation and the publishing queue."""
