"""
Core Package.

Contains the expansion pipeline:
- Expression Parser and invocation surface
- Mode Resolver
- Suffix Rewriter
- Expression Emitter
- Engine and Module Expander
"""
