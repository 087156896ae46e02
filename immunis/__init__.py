"""Immunis combat core.

Turn-based combat simulation between antibody and pathogen units:
- core: enums, entity/component foundation and the injectable random source
- game: unit components and catalog, immune memory, combat engine and stepper
"""
