"""
Application layer.

Use-case services that coordinate ownership checks, persistence and
the core pipeline and RAG components.
"""
