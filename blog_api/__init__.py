"""
blog_api - JSON API for a multi-author blog.

Features:
- Email/password accounts with signed session cookies
- Posts with publish flag, likes and comments
- Avatar and thumbnail uploads through any Django storage backend
- Best-effort admin alerts on new signups
"""

__version__ = "0.1.0"
