"""
Feature modules

Each feature exposes a register_*_listeners(bus) entry point. Features
never import each other; they only share the channel registry.
"""
