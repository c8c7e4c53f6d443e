"""
Core business logic module.

Document processing pipeline, RAG query engine and the exception
hierarchy. All business rules and domain-specific logic reside here.
"""
