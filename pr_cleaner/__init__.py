"""
pr-cleaner-ai bootstrapper
==========================
Developer-tooling helpers that run around the pr-cleaner-ai PR-comment
workflow: verifying its external tools up front, and keeping the Cursor
rules file in the consumer project in step with the installed package.

Modules
-------
- config        – Optional YAML configuration + CI detection
- requirements  – External tool probes and the requirement check
- sync          – Rules-file synchronisation (postinstall hook)
- report        – Rich terminal rendering for both
"""
