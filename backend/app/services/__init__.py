"""Core domain services: identity, job postings, applications and the access policy."""
