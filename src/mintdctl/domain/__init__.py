"""Pure domain logic: defaults, rendering, validation, unit descriptors.

Domain modules perform no I/O and never import from services, commands,
or output.
"""
