"""
Application Package

Use-case services orchestrating the engine.
"""
