"""
campus_blog - review workflow for a university blog.

Features:
- Submission, approval and rejection of posts by administrators
- Unique human-readable slugs assigned on publication
- Role and approval based visibility rules
- Threaded comments on published posts
- Cached site settings (maintenance mode, registration, auto-publish)
"""

__version__ = "0.1.0"
