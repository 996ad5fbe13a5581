"""Parsing, model building and canonicalization.

WHY: The core package holds everything that gives the dump its meaning:
the INI dialect, the snapshot model, the per-file build rules and the
ordering rules. Writers and the CLI only consume what it produces.

HOW: text.py has the string helpers, ini.py the dialect parser,
model.py the dataclasses, builder.py the three per-role build
functions, canonical.py the sort/dedup pass.

RULES:
- Model dataclasses are the contract between core and the writers
- Nothing in core writes files or prints
"""
