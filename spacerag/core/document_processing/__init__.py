"""
Document processing pipeline for ingestion.

Extract -> Chunk -> Embed stages driven by DocumentPipeline, each run
under its own retry policy by the in-process TaskRunner.
"""
