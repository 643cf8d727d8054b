"""
Core package for DocChunk.

This package contains all low-level document processing logic:
- PDF loading, table detection & positional text extraction
- Text normalization & token estimation
- Semantic chunking
"""
