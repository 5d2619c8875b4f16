"""
Static Analysis Package.

Passes that inspect (and mark) a file's syntax tree before rewriting.

Modules:
    - ``instanceof``: Rewriting identity checks into structural checks.
    - ``provides``: Classifying namespace accesses into provides and requires.
    - ``dependencies``: Resolving requires to files, cycle tests, integrity.
"""
