"""
Placement Portal
A role-based campus placement tracker.

Architecture:
- MongoDB: users, companies (job listings), applications
- Disk: uploaded resumes, addressed by filename
- JWT: stateless bearer credentials for students, TPOs and admins
"""

__version__ = "1.0.0"
