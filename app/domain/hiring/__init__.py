"""
Hiring bounded context: domain layer.

This module contains the domain logic for the job board:
- Companies and the jobs they post
- Job applications and their recruiting pipeline
- Accounts and sessions of platform users
"""
